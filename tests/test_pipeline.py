import io
import logging
import textwrap
from pathlib import Path

import pytest

from reqmap.orchestrator.pipeline import collect_endpoints, run
from reqmap.utils.exceptions import JavaSyntaxError


def write(p: Path, s: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(s), encoding="utf-8")


def make_repo(root: Path) -> None:
    write(
        root / "users" / "UserController.java",
        """
        package app.users;

        @RequestMapping("/users")
        public class UserController {
            @RequestMapping(method = RequestMethod.GET)
            public String list() { return ""; }

            @RequestMapping(value = "/{id}", method = RequestMethod.DELETE)
            public void delete(long id) {}
        }
        """,
    )
    # same simple type name as above, different package and file
    write(
        root / "admin" / "UserController.java",
        """
        package app.admin;

        @RequestMapping("/admin/users")
        public class UserController {
            @RequestMapping(method = RequestMethod.GET)
            public String list() { return ""; }
        }
        """,
    )


def test_collect_endpoints_over_directory(tmp_path: Path):
    make_repo(tmp_path)
    result = collect_endpoints([tmp_path])

    assert result.files_scanned == 2
    assert result.skipped_files == []
    assert result.unresolved == []
    assert {(e.http_method, e.http_path, e.declaration_id) for e in result.endpoints} == {
        ("GET", "/users", "app.users.UserController#list"),
        ("DELETE", "/users/{id}", "app.users.UserController#delete"),
        ("GET", "/admin/users", "app.admin.UserController#list"),
    }


def test_run_writes_sorted_report(tmp_path: Path):
    make_repo(tmp_path)
    out = io.StringIO()
    run([tmp_path], out=out)

    lines = out.getvalue().splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("[1] /admin/users GET    = app.admin.UserController#list ")
    assert lines[1].startswith("[2] /users       GET    = app.users.UserController#list ")
    assert lines[2].startswith("[3] /users/{id}  DELETE = app.users.UserController#delete ")
    assert lines[2].endswith(f"({tmp_path / 'users' / 'UserController.java'})")


def test_run_without_endpoints_writes_nothing(tmp_path: Path):
    write(tmp_path / "Plain.java", "class Plain { void m() {} }")
    out = io.StringIO()
    result = run([tmp_path], out=out)
    assert result.files_scanned == 1
    assert out.getvalue() == ""


def test_parse_failure_aborts_by_default(tmp_path: Path):
    make_repo(tmp_path)
    write(tmp_path / "Broken.java", "class Broken { void m( { }")

    with pytest.raises(JavaSyntaxError):
        collect_endpoints([tmp_path])


def test_keep_going_skips_broken_files(tmp_path: Path):
    make_repo(tmp_path)
    write(tmp_path / "Broken.java", "class Broken { void m( { }")

    result = collect_endpoints([tmp_path], keep_going=True)
    assert result.skipped_files == [str(tmp_path / "Broken.java")]
    assert len(result.endpoints) == 3


def test_json_output(tmp_path: Path):
    make_repo(tmp_path)
    out = io.StringIO()
    run([tmp_path], out=out, fmt="json")
    assert '"http_path": "/admin/users"' in out.getvalue()


@pytest.fixture
def reqmap_caplog(caplog, monkeypatch):
    # the reqmap logger does not propagate to the root logger caplog listens on
    monkeypatch.setattr(logging.getLogger("reqmap"), "propagate", True)
    with caplog.at_level(logging.DEBUG, logger="reqmap"):
        yield caplog


def test_progress_is_logged_before_each_file(tmp_path: Path, reqmap_caplog):
    make_repo(tmp_path)
    collect_endpoints([tmp_path])

    progress = [r.getMessage() for r in reqmap_caplog.records if "endpoints so far" in r.getMessage()]
    assert progress == [
        f"0 endpoints so far. Processing {tmp_path / 'admin' / 'UserController.java'}",
        f"1 endpoints so far. Processing {tmp_path / 'users' / 'UserController.java'}",
    ]


def test_summary_counts_and_logs_unresolved_declarations(tmp_path: Path, reqmap_caplog):
    make_repo(tmp_path)
    write(
        tmp_path / "misc" / "NoMethod.java",
        """
        package app.misc;

        public class NoMethod {
            @RequestMapping("/nomethod")
            public void x() {}
        }
        """,
    )

    result = run([tmp_path], out=io.StringIO())
    assert result.unresolved == ["app.misc.NoMethod#x"]

    messages = [r.getMessage() for r in reqmap_caplog.records]
    assert (
        "Files scanned: 3, endpoints: 3, unresolved declarations: 1, skipped files: 0" in messages
    )
    debug = [r for r in reqmap_caplog.records if r.levelno == logging.DEBUG]
    assert [r.getMessage() for r in debug] == ["No HTTP method resolved for app.misc.NoMethod#x"]


def test_keep_going_logs_a_warning_per_skipped_file(tmp_path: Path, reqmap_caplog):
    write(tmp_path / "Broken.java", "class Broken { void m( { }")

    result = run([tmp_path], out=io.StringIO(), keep_going=True)
    assert result.skipped_files == [str(tmp_path / "Broken.java")]

    warnings = [r.getMessage() for r in reqmap_caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert warnings[0].startswith("Skipping Java syntax error in")
    assert "Broken.java" in warnings[0]
