"""
Command-line tests

Run main() against a route table written to a temporary directory.
"""

import pytest

from routetree.__main__ import main, params_parse
from routetree.config import appsettings

TABLE = """
base_path: app
routes:
  - name: post
    pattern: "/post?{page}"
  - name: post.id
    pattern: "/{id:[0-9]+}"
  - name: home
    pattern: "/"
    content:
      redirect_to: post
"""


@pytest.fixture
def routes_file(tmp_path, monkeypatch):
    monkeypatch.setattr(appsettings, "highlight_patterns", False)
    path = tmp_path / "routes.yaml"
    path.write_text(TABLE)
    return str(path)


def stdout_lines(capsys):
    return capsys.readouterr().out.splitlines()


class TestParamsParse:
    """Test KEY=VALUE parsing"""

    def test_pairs(self):
        assert params_parse(["id=1", "tag=a", "tag=b", "q=x=y"]) == {
            "id": "1",
            "tag": ["a", "b"],
            "q": "x=y",
        }

    @pytest.mark.parametrize("pair", ["id", "=1"])
    def test_invalid(self, pair):
        with pytest.raises(ValueError, match="Expected KEY=VALUE"):
            params_parse([pair])


class TestCommands:
    """Test --list, --match and --link"""

    def test_list(self, routes_file, capsys):
        assert main([routes_file, "--list"]) == 0

        lines = stdout_lines(capsys)
        assert len(lines) == 3
        assert lines[0].split() == ["post", "/post?{page}"]
        assert lines[1].split() == ["post.id", "/post/{id:[0-9]+}"]
        assert lines[2].split() == ["home", "/"]

    def test_match(self, routes_file, capsys):
        assert main([routes_file, "--match", "/app/post/12?page=2"]) == 0

        assert stdout_lines(capsys) == [
            "route:    post.id",
            'params:   {"id": "12", "page": "2"}',
            "disabled: []",
            "enabled:  ['', 'post', 'post.id']",
        ]

    def test_match_redirect(self, routes_file, capsys):
        assert main([routes_file, "--match", "/app/"]) == 0

        assert stdout_lines(capsys)[0] == "route:    post"

    def test_transition(self, routes_file, capsys):
        assert main([routes_file, "--from", "/app/post/12", "--match", "/app/post/13"]) == 0

        lines = stdout_lines(capsys)
        assert lines[2] == "disabled: ['post.id']"
        assert lines[3] == "enabled:  ['post.id']"

    def test_no_match(self, routes_file, capsys):
        assert main([routes_file, "--match", "/app/user/1"]) == 2

        assert "No route matches" in capsys.readouterr().err

    def test_link(self, routes_file, capsys):
        assert main([routes_file, "--link", "post.id", "--param", "id=12", "--param", "page=3"]) == 0

        assert stdout_lines(capsys) == ["/app/post/12?page=3"]


class TestErrors:
    """Test error exits"""

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "missing.yaml"), "--list"])

        assert excinfo.value.code == 1
        assert "Route table not found" in capsys.readouterr().err

    def test_invalid_table(self, tmp_path, capsys):
        path = tmp_path / "routes.yaml"
        path.write_text("routes:\n  - pattern: /post\n")

        with pytest.raises(SystemExit) as excinfo:
            main([str(path), "--list"])

        assert excinfo.value.code == 1

    def test_invalid_pattern(self, tmp_path, capsys):
        path = tmp_path / "routes.yaml"
        path.write_text("routes:\n  - name: post\n    pattern: '/post[/{id}'\n")

        with pytest.raises(SystemExit) as excinfo:
            main([str(path), "--list"])

        assert excinfo.value.code == 1
        assert "Route table error" in capsys.readouterr().err

    def test_link_mismatch(self, routes_file, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([routes_file, "--link", "post.id", "--param", "id=abc"])

        assert excinfo.value.code == 1
        assert "Expected `'id'` to match" in capsys.readouterr().err

    def test_link_unknown_route(self, routes_file, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([routes_file, "--link", "user"])

        assert excinfo.value.code == 1

    def test_debug_mode(self, routes_file, monkeypatch, capsys):
        monkeypatch.setattr(appsettings, "debug_mode", True)

        assert main([routes_file, "--link", "post"]) == 0
        assert stdout_lines(capsys) == ["/app/post"]
