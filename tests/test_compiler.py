"""
Compiler tests - token trees to regex and variables
"""

import re

import pytest

from routetree.lib.compiler import Compiler, literal_escape, rule_make
from routetree.lib.errors import DuplicateVariableError, PatternError, RepeatCardinalityError
from routetree.lib.parser import Parser
from routetree.models.tokens import CompiledRule, VariableDescriptor


def template(pattern):
    return Compiler().compile(Parser().tokenize(pattern))


class TestCompile:
    """Test regex composition"""

    def test_static(self):
        assert template("/test") == CompiledRule(regex="/test", variables=[])

    def test_variable(self):
        rule = template("/test/{param}")

        assert rule.regex == "/test/([^/]+)"
        assert rule.variables == [VariableDescriptor("param")]

    def test_nested_optional_groups(self):
        """Optional groups add no capturing group of their own"""
        rule = template("/test[/{name}[/{id:[0-9]+}]]")

        assert rule.regex == "/test(?:/([^/]+)(?:/([0-9]+))?)?"
        assert rule.variables == [VariableDescriptor("name"), VariableDescriptor("id")]

    def test_repeatable_group(self):
        """Repeatable group captures the whole run"""
        rule = template("/test[/{name}[/{id:[0-9]+}]*]")

        assert rule.regex == "/test(?:/([^/]+)((?:/[0-9]+)*))?"
        assert rule.variables == [
            VariableDescriptor("name"),
            VariableDescriptor("id", "/{id:[0-9]+}"),
        ]

    def test_one_or_more(self):
        rule = template("post[/{id}]+")

        assert rule.regex == "post((?:/[^/]+)+)"
        assert rule.names == ["id"]

    def test_static_repeatable_group(self):
        """Repeatable group without variable captures nothing"""
        rule = template("a[b]+")

        assert rule.regex == "a(?:b)+"
        assert rule.variables == []

    def test_variable_order_matches_groups(self):
        """Variables follow the order of capturing groups"""
        rule = template("[{relation}/{rid}/]post[/{id}][/:{action}]")

        assert rule.names == ["relation", "rid", "id", "action"]
        assert re.compile(rule.regex).groups == 4

    def test_rule_make(self):
        assert rule_make("/{id}", "/").regex == "/([^/]+)"


class TestLiteralEscaping:
    """Test regex escaping of literal text"""

    def test_dot(self):
        assert template("file.json").regex == "file\\.json"

    def test_metacharacters(self):
        assert literal_escape("a(b)|c+*?^$") == "a\\(b\\)\\|c\\+\\*\\?\\^\\$"

    def test_untouched(self):
        """Slash, colon and dash are not escaped"""
        assert literal_escape("/a-b:c") == "/a-b:c"


class TestCompileErrors:
    """Test compile-time pattern errors"""

    def test_duplicate_variable(self):
        with pytest.raises(DuplicateVariableError, match="Cannot use the same placeholder `var` twice."):
            template("/test/{var}/{var}")

    def test_duplicate_variable_across_groups(self):
        with pytest.raises(DuplicateVariableError) as excinfo:
            template("/test/{var}[/{var}]")
        assert excinfo.value.name == "var"

    def test_duplicate_variable_in_sibling_groups(self):
        with pytest.raises(DuplicateVariableError):
            template("/a[/{x}][/{x}]")

    def test_duplicate_variable_in_nested_groups(self):
        with pytest.raises(DuplicateVariableError):
            template("/a[/{x}[/{y}[/{x}]]]")

    def test_several_variables_in_repeatable_group(self):
        with pytest.raises(RepeatCardinalityError):
            template("/test[/{var1}/{var2}]*")

    def test_several_variables_in_nested_repeatable_group(self):
        with pytest.raises(RepeatCardinalityError) as excinfo:
            template("[/{a}[/{b}]]+")
        assert excinfo.value.pattern == "/{a}[/{b}]"

    def test_errors_are_pattern_errors(self):
        with pytest.raises(PatternError):
            template("[/{a}/{b}]*")
