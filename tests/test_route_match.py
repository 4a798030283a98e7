"""
Route matching tests

Tests that:
- The deepest fully matching route wins
- Children are tried in declaration order
- Optional and repeatable variables are extracted
- Query variables accumulate from ancestors
- Defaults, query and path values are merged
"""

import re

import pytest

from routetree.lib.route import Route


def blog_tree():
    root = Route()
    root.add("post", "/post?{page}")
    root.add("post.id", "/{id}?{tab}")
    root.add("post.id.edit", "/edit")
    return root


class TestMatchTree:
    """Test route selection"""

    def test_deepest_route(self):
        result = blog_tree().match("post/12/edit")

        assert result.route.name == "post.id.edit"
        assert result.params == {"id": "12"}

    def test_parent_route(self):
        result = blog_tree().match("post/12")

        assert result.route.name == "post.id"
        assert result.params == {"id": "12"}

    def test_static_route(self):
        result = blog_tree().match("post")

        assert result.route.name == "post"
        assert result.params == {}

    def test_trailing_slash(self):
        """A trailing slash is allowed on the full match"""
        assert blog_tree().match("post/").route.name == "post"
        assert blog_tree().match("post/12/").route.name == "post.id"

    def test_no_match(self):
        assert blog_tree().match("user/12") is None
        assert blog_tree().match("post/12/delete") is None

    def test_prefix_is_not_enough(self):
        """A route matching only a prefix of the path is rejected"""
        root = Route()
        root.add("post", "/post")

        assert root.match("posts") is None

    def test_declaration_order(self):
        """First declared child wins"""
        root = Route()
        root.add("page", "/{slug}")
        root.add("about", "/about")

        assert root.match("about").route.name == "page"

    def test_match_returns_route_object(self):
        root = blog_tree()

        assert root.match("post/1").route is root.fetch("post.id")


class TestMatchVariables:
    """Test variable extraction"""

    def test_absent_optional_variable(self):
        root = Route()
        root.add("foo", "/foo[/{bar}]")

        assert root.match("foo").params == {"bar": None}
        assert root.match("foo/baz").params == {"bar": "baz"}

    def test_custom_capture(self):
        root = Route()
        root.add("post", "/post/{id:[0-9]+}")

        assert root.match("post/12").params == {"id": "12"}
        assert root.match("post/abc") is None

    def test_repeatable_variable(self):
        root = Route()
        root.add("post", "/post[/{id}]*")

        assert root.match("post/1/2/3").params == {"id": ["1", "2", "3"]}
        assert root.match("post").params == {"id": []}

    def test_nested_repeatable_variable(self):
        root = Route()
        root.add("test", "/test[/{name}[/{id:[0-9]+}]*]")

        assert root.match("test/foo/1/2").params == {"name": "foo", "id": ["1", "2"]}
        assert root.match("test/foo").params == {"name": "foo", "id": []}
        assert root.match("test").params == {"name": None, "id": []}

    def test_tuple_repetitions(self):
        """Repetitions holding the delimiter are split into lists"""
        root = Route()
        root.add("post", "[{relations:[^/]+/[^/:][^/]*}/]*post")

        assert root.match("user/5/post").params == {"relations": [["user", "5"]]}
        assert root.match("user/5/group/3/post").params == {
            "relations": [["user", "5"], ["group", "3"]],
        }
        assert root.match("post").params == {"relations": []}

    def test_several_optional_groups(self):
        root = Route()
        root.add("post", "[{relation}/{rid:[^/:][^/]*}/]post[/{id:[^/:][^/]*}][/:{action}]")

        assert root.match("user/5/post/12/:edit").params == {
            "relation": "user",
            "rid": "5",
            "id": "12",
            "action": "edit",
        }
        assert root.match("post/:add").params == {
            "relation": None,
            "rid": None,
            "id": None,
            "action": "add",
        }

    def test_regex_is_compiled_once(self):
        """Matching reuses the regex compiled when the pattern was set"""
        root = Route()
        route = root.add("post", "/post/{id}")
        compiled = route._full_regex

        root.match("post/1")
        root.match("post/2")

        assert route._full_regex is compiled
        assert isinstance(compiled, re.Pattern)


class TestMatchParams:
    """Test query variables and defaults"""

    def test_query_variables(self):
        result = blog_tree().match("post", {"page": "2", "other": "x"})

        assert result.params == {"page": "2"}

    def test_query_variables_accumulate(self):
        """Ancestor query variables reach descendants"""
        result = blog_tree().match("post/1/edit", {"page": "2", "tab": "comments"})

        assert result.params == {"page": "2", "tab": "comments", "id": "1"}

    def test_undeclared_query_variables_are_ignored(self):
        result = blog_tree().match("post/1", {"id": "9", "sort": "asc"})

        assert result.params == {"id": "1"}

    def test_path_wins_over_query(self):
        root = Route()
        root.add("post", "/post/{id}?{id}")

        assert root.match("post/1", {"id": "2"}).params == {"id": "1"}

    def test_defaults(self):
        root = Route()
        root.add("post", "/post[/{lang}]", params={"lang": "en", "format": "html"})

        assert root.match("post").params == {"lang": "en", "format": "html"}
        assert root.match("post/fr").params == {"lang": "fr", "format": "html"}

    def test_round_trip(self):
        """A generated path matches back to its parameters"""
        root = Route()
        route = root.add("post", "/post/{id:[0-9]+}/{slug}")
        params = {"id": "12", "slug": "hello-world"}

        assert root.match(route.path(params).lstrip("/")).params == params

    @pytest.mark.parametrize("slug", ["hello world", "é", "a/b", "100%", "a?b#c"])
    def test_round_trip_encoded_values(self, slug):
        """Percent-encoded values are decoded back"""
        root = Route()
        route = root.add("post", "/post/{slug}")

        assert root.match(route.path({"slug": slug}).lstrip("/")).params == {"slug": slug}

    def test_round_trip_repeated_values(self):
        root = Route()
        route = root.add("tags", "/tags[/{tag}]*")
        params = {"tag": ["a b", "c/d", "é"]}

        assert root.match(route.path(params).lstrip("/")).params == params

    def test_round_trip_tuple_values(self):
        root = Route()
        route = root.add("post", "[{relations:[^/]+/[^/:][^/]*}/]*post")
        params = {"relations": [["user group", "5 6"]]}

        assert route.path(params) == "/user%20group/5%206/post"
        assert root.match(route.path(params).lstrip("/")).params == params


class TestMatchRepeat:
    """Test repeatable group cardinality"""

    def test_one_or_more_requires_a_value(self):
        root = Route()
        root.add("post", "/post[/{id}]+")

        assert root.match("post") is None
        assert root.match("post/123/456/789").params == {"id": ["123", "456", "789"]}
