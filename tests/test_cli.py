import json
import os
import subprocess
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

import onenote_cli.__main__ as cli
import onenote_cli.commands.pages as pages_cmd
from onenote_cli.core.errors import CredentialMissing, NetworkError
from onenote_cli.core.pagination import CollectionPage

ROOT = Path(__file__).resolve().parents[1]


def run_cli(*args, env=None):
    return subprocess.run(
        [sys.executable, "-m", "onenote_cli", *args],
        capture_output=True,
        text=True,
        cwd=ROOT,
        env=env,
    )


def test_cli_help():
    result = run_cli("--help")
    assert result.returncode == 0
    assert "{auth,notebooks,sections,pages,export,mcp}" in result.stdout


def test_pages_help():
    result = run_cli("pages", "--help")
    assert result.returncode == 0
    for name in ("list", "search", "get"):
        assert name in result.stdout


def test_auth_set(tmp_path):
    env = {**os.environ, "HOME": str(tmp_path)}
    env.pop("ONENOTE_TOKEN_FILE", None)
    result = run_cli("auth", "set", "--token", "secret", env=env)
    assert result.returncode == 0
    saved = json.loads((tmp_path / ".onenote-access-token.txt").read_text())
    assert saved == {"token": "secret"}


def test_pages_get_requires_page_id():
    result = run_cli("pages", "get")
    assert result.returncode == 2
    assert "usage:" in result.stderr


def test_missing_token_exits_nonzero(tmp_path):
    env = {**os.environ, "HOME": str(tmp_path)}
    for var in ("ONENOTE_TOKEN_FILE", "GRAPH_ACCESS_TOKEN"):
        env.pop(var, None)
    result = run_cli("notebooks", "list", env=env)
    assert result.returncode == 2
    assert "Access token not found" in result.stderr


def test_group_without_subcommand_prints_help(capsys):
    assert cli.main(["pages"]) == 0
    assert "list" in capsys.readouterr().out


def test_unknown_flags_are_ignored(monkeypatch):
    seen = {}

    def fake_pages_list(args):
        seen["args"] = args
        return 0

    monkeypatch.setattr(cli, "cmd_pages_list", fake_pages_list)

    code = cli.main(["pages", "list", "--top=5", "--bogus", "--next-link='https://x/next'", "--fetch-all"])
    assert code == 0
    args = seen["args"]
    assert args.top == 5
    assert args.next_link == "https://x/next"
    assert args.fetch_all is True


def test_typed_errors_exit_2(monkeypatch, capsys):
    def boom(_args):
        raise NetworkError("[HTTP 503] busy", status=503)

    monkeypatch.setattr(cli, "cmd_notebooks_list", boom)
    assert cli.main(["notebooks", "list"]) == 2
    assert "busy" in capsys.readouterr().err


def test_credential_errors_suggest_auth(monkeypatch, capsys):
    def boom(_args):
        raise CredentialMissing("Access token not found")

    monkeypatch.setattr(cli, "cmd_sections_list", boom)
    assert cli.main(["sections", "list"]) == 2
    assert "onenote auth set" in capsys.readouterr().err


def test_pages_list_prints_manifest_lines(monkeypatch, capsys):
    captured = {}

    def fake_list_pages(client, section_id, **kwargs):
        captured.update(kwargs, section_id=section_id)
        return CollectionPage(
            [
                {
                    "id": "1-abc",
                    "title": "Plan",
                    "createdDateTime": "2023-01-01T00:00:00Z",
                    "lastModifiedDateTime": "2023-02-01T00:00:00Z",
                }
            ],
            "https://graph.example/next",
        )

    monkeypatch.setattr(pages_cmd, "get_client", lambda: object())
    monkeypatch.setattr(pages_cmd, "list_pages", fake_list_pages)

    args = SimpleNamespace(section_id="s1", next_link=None, top=20, fetch_all=False, pick=False, json=False)
    assert pages_cmd.cmd_pages_list(args) == 0
    out, _ = capsys.readouterr()
    assert "1. Plan (Created: 2023-01-01T00:00:00Z, Modified: 2023-02-01T00:00:00Z) -- 1-abc" in out
    assert '--next-link="https://graph.example/next"' in out
    assert captured["section_id"] == "s1"
    assert captured["top"] == 20


def test_pages_list_reports_partial_listing(monkeypatch, capsys):
    monkeypatch.setattr(pages_cmd, "get_client", lambda: object())
    monkeypatch.setattr(
        pages_cmd,
        "list_pages",
        lambda client, section_id, **kw: CollectionPage([{"id": "a", "title": "A"}], None, "[HTTP 503] busy"),
    )
    args = SimpleNamespace(section_id="s1", next_link=None, top=None, fetch_all=True, pick=False, json=True)
    assert pages_cmd.cmd_pages_list(args) == 1
    out, err = capsys.readouterr()
    assert json.loads(out)["error"] == "[HTTP 503] busy"
    assert "Listing incomplete" in err


def test_pages_get_writes_file(monkeypatch, tmp_path, capsys, fake_client):
    client = fake_client(
        json={"/me/onenote/pages/p1": {"id": "p1", "title": "Plan", "lastModifiedDateTime": "2023-02-03T00:00:00Z"}},
        text={"/me/onenote/pages/p1/content": "<html><body><p>Hello   world</p></body></html>"},
    )
    monkeypatch.setattr(pages_cmd, "get_client", lambda: client)
    args = SimpleNamespace(page_id="p1", out_dir=str(tmp_path), snippet=True)
    assert pages_cmd.cmd_pages_get(args) == 0
    out, _ = capsys.readouterr()
    assert "Hello world" in out
    assert (tmp_path / "Plan--20230203.html").exists()


@pytest.mark.parametrize("term,header", [("plan", 'Search: "plan"'), (None, "All pages:")])
def test_pages_search_output(monkeypatch, capsys, term, header):
    monkeypatch.setattr(pages_cmd, "get_client", lambda: object())
    monkeypatch.setattr(pages_cmd, "search_pages", lambda client, t, s, desc=None: [{"id": "1", "title": "Plan"}])
    args = SimpleNamespace(term=term, section_id=None, json=False)
    assert pages_cmd.cmd_pages_search(args) == 0
    out, _ = capsys.readouterr()
    assert header in out
    assert "Total: 1 page(s)" in out
