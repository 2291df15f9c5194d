from reqmap.domain.models import RoutingAttributes
from reqmap.resolve.combinator import cartesian_product, combine, fold_methods, fold_paths


def pairs(endpoints):
    return [(e.http_method, e.http_path) for e in endpoints]


def test_method_scope_only_single_endpoint():
    eps = combine(
        [RoutingAttributes(methods=("GET",), paths=("/a",))],
        file_path="A.java",
        declaration_id="p.A#a",
    )
    assert pairs(eps) == [("GET", "/a")]
    assert eps[0].file_path == "A.java"
    assert eps[0].declaration_id == "p.A#a"


def test_paths_are_concatenated_without_separator():
    sets = [
        RoutingAttributes(paths=("/base",)),
        RoutingAttributes(methods=("GET",), paths=("/x", "/y")),
    ]
    assert fold_paths(sets) == ["/base/x", "/base/y"]

    no_slash = [RoutingAttributes(paths=("/base",)), RoutingAttributes(paths=("x",))]
    assert fold_paths(no_slash) == ["/basex"]


def test_empty_inner_paths_inherit_outer():
    sets = [RoutingAttributes(paths=("/base", "/alt")), RoutingAttributes(methods=("GET",))]
    assert fold_paths(sets) == ["/base", "/alt"]


def test_no_paths_anywhere_yields_empty_path():
    assert fold_paths([RoutingAttributes(methods=("GET",))]) == [""]


def test_inner_empty_methods_inherit_outer():
    sets = [RoutingAttributes(methods=("GET", "POST")), RoutingAttributes(paths=("/a",))]
    assert fold_methods(sets) == ["GET", "POST"]


def test_inner_methods_override_outer():
    sets = [RoutingAttributes(methods=("GET",)), RoutingAttributes(methods=("POST",))]
    assert fold_methods(sets) == ["POST"]


def test_no_methods_anywhere_yields_no_endpoints():
    sets = [RoutingAttributes(paths=("/base",)), RoutingAttributes(paths=("/a",))]
    assert fold_methods(sets) == []
    assert combine(sets, file_path="A.java", declaration_id="p.A#a") == []


def test_duplicates_multiply_instead_of_collapsing():
    sets = [
        RoutingAttributes(paths=("/a", "/a")),
        RoutingAttributes(methods=("GET", "GET"), paths=("/x",)),
    ]
    eps = combine(sets, file_path="A.java", declaration_id="p.A#a")
    assert pairs(eps) == [("GET", "/a/x")] * 4


def test_product_is_method_major_and_keeps_declaration_order():
    sets = [
        RoutingAttributes(paths=("/v1", "/v2")),
        RoutingAttributes(methods=("PUT", "PATCH"), paths=("/items",)),
    ]
    eps = combine(sets, file_path="A.java", declaration_id="p.A#a")
    assert pairs(eps) == [
        ("PUT", "/v1/items"),
        ("PUT", "/v2/items"),
        ("PATCH", "/v1/items"),
        ("PATCH", "/v2/items"),
    ]


def test_paths_are_not_normalized():
    sets = [RoutingAttributes(paths=("/api/",)), RoutingAttributes(methods=("GET",), paths=("/users/ ",))]
    assert fold_paths(sets) == ["/api//users/ "]


def test_cartesian_product_with_empty_operand():
    assert cartesian_product([], ["a", "b"], lambda x, y: (x, y)) == []
    assert cartesian_product([1], [], lambda x, y: (x, y)) == []
