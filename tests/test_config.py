import json

import onenote_cli.core.config as config
from onenote_cli.core import get_client
from onenote_cli.core.utils import date_stamp, export_filename, format_rows, html_snippet, safe_name


def test_defaults(isolated_home):
    assert config.get_base_url() == config.DEFAULT_BASE
    assert config.get_token_path() == isolated_home / ".onenote-access-token.txt"
    assert config.get_request_timeout() == 60.0


def test_config_file_and_env(isolated_home, monkeypatch):
    (isolated_home / ".onenote-cli.json").write_text(
        json.dumps({"base_url": "https://graph.example/beta/", "token_file": str(isolated_home / "t.txt")})
    )
    monkeypatch.setenv("ONENOTE_REQUEST_TIMEOUT_MS", "1500")
    assert config.get_base_url() == "https://graph.example/beta"
    assert config.get_token_path() == isolated_home / "t.txt"
    assert config.get_request_timeout() == 1.5

    monkeypatch.setenv("ONENOTE_BASE_URL", "https://override.example")
    assert config.get_base_url() == "https://override.example"


def test_bad_timeout_env_is_logged(isolated_home, monkeypatch, caplog):
    monkeypatch.setenv("ONENOTE_REQUEST_TIMEOUT_MS", "soon")
    with caplog.at_level("WARNING", logger="onenote_cli.core.config"):
        assert config.get_request_timeout() == config.REQUEST_TIMEOUT
    assert "ONENOTE_REQUEST_TIMEOUT_MS" in caplog.text


def test_broken_config_is_ignored(isolated_home):
    (isolated_home / ".onenote-cli.json").write_text("{not json")
    assert config.load_config() == {}


def test_get_client(isolated_home):
    (isolated_home / ".onenote-access-token.txt").write_text('{"token": "abc"}')
    client = get_client()
    assert client.token == "abc"
    assert client.base_url == config.DEFAULT_BASE


def test_safe_name():
    assert safe_name('a<b>c:d"e/f\\g|h?i*j') == "a_b_c_d_e_f_g_h_i_j"
    assert safe_name("Plain title") == "Plain title"


def test_export_filename():
    assert export_filename("Q1: goals", "2023-07-09T22:15:00Z") == "Q1_ goals--20230709.html"
    assert date_stamp(None) == "00000000"


def test_html_snippet():
    assert html_snippet("<h1>Title</h1>\n<p>Body  text</p>") == "Title Body text"
    assert html_snippet("<p>" + "x" * 600 + "</p>", 500) == "x" * 500 + "..."


def test_format_rows(capsys):
    format_rows([{"id": "1", "displayName": "Work"}], ["id", "displayName"])
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("id | displayName")
    assert out[2].startswith("1  | Work")
    format_rows([], ["id"])
    assert "(no data)" in capsys.readouterr().out
