"""
Route table loading tests
"""

import pytest

from routetree.lib.errors import RouteTableError, UnknownParentError
from routetree.lib.table import router_build, table_load

TABLE = """
base_path: app
routes:
  - name: post
    pattern: "/post?{page}"
    content:
      component: PostList
  - name: post.id
    pattern: "/{id:[0-9]+}"
    params:
      tab: summary
  - name: home
    pattern: "/"
    content:
      redirect_to: post
"""


@pytest.fixture
def table_file(tmp_path):
    path = tmp_path / "routes.yaml"
    path.write_text(TABLE)
    return path


class TestTableLoad:
    """Test table_load()"""

    def test_load(self, table_file):
        table = table_load(table_file)

        assert table.base_path == "app"
        assert [route.name for route in table.routes] == ["post", "post.id", "home"]
        assert table.routes[0].content == {"component": "PostList"}
        assert table.routes[1].params == {"tab": "summary"}

    def test_list_document(self, tmp_path):
        path = tmp_path / "routes.yaml"
        path.write_text("- name: post\n  pattern: /post\n")

        table = table_load(path)

        assert table.base_path is None
        assert table.routes[0].pattern == "/post"

    def test_empty_document(self, tmp_path):
        path = tmp_path / "routes.yaml"
        path.write_text("")

        assert table_load(path).routes == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(RouteTableError, match="Failed to read"):
            table_load(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "routes.yaml"
        path.write_text("routes: [\n")

        with pytest.raises(RouteTableError, match="Failed to parse"):
            table_load(path)

    @pytest.mark.parametrize(
        "document",
        [
            "routes:\n  - pattern: /post\n",
            "routes:\n  - name: post\n    method: GET\n",
            "routes:\n  - name: post..id\n",
            "routing: []\n",
        ],
    )
    def test_invalid_table(self, tmp_path, document):
        path = tmp_path / "routes.yaml"
        path.write_text(document)

        with pytest.raises(RouteTableError, match="Invalid route table"):
            table_load(path)


class TestRouterBuild:
    """Test router_build()"""

    def test_build(self, table_file):
        router = router_build(table_load(table_file))

        assert router.base_path == "/app"
        assert router.fetch("post.id").pattern == "post/{id:[0-9]+}"
        assert router.fetch("post.id").params == {"tab": "summary"}
        assert router.match("/app/").to_route.name == "post"

    def test_parent_after_child(self, tmp_path):
        path = tmp_path / "routes.yaml"
        path.write_text("routes:\n  - name: post.id\n    pattern: /{id}\n  - name: post\n")

        with pytest.raises(UnknownParentError):
            router_build(table_load(path))
