import json

from websearch import __main__ as cli
from websearch.search.errors import LaunchError
from websearch.search.models import SearchResult


def _patch_search(monkeypatch, *, result=None, error=None) -> dict:
    captured: dict = {}

    async def fake_search(self, engine, query, *, include_images=False, max_links=10):
        captured.update(engine=engine, query=query, include_images=include_images, max_links=max_links)
        if error:
            raise error
        return result

    monkeypatch.setattr(cli.SearchOrchestrator, "search", fake_search)
    return captured


def test_search_command_prints_json(monkeypatch, tmp_path, capsys) -> None:
    captured = _patch_search(
        monkeypatch,
        result=SearchResult(results_text="Paris", links=["https://a.example"], images=[]),
    )

    code = cli.main(
        ["--config", str(tmp_path / "none.json"), "search", "google", "capital of france", "--max-links", "3"]
    )

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {
        "results": "Paris",
        "links": ["https://a.example"],
        "images": [],
    }
    assert captured == {
        "engine": "google",
        "query": "capital of france",
        "include_images": False,
        "max_links": 3,
    }


def test_search_command_unknown_engine(tmp_path) -> None:
    assert cli.main(["--config", str(tmp_path / "none.json"), "search", "bing", "x"]) == 2


def test_search_command_failure(monkeypatch, tmp_path) -> None:
    _patch_search(monkeypatch, error=LaunchError("failed to launch chromium"))

    assert cli.main(["--config", str(tmp_path / "none.json"), "search", "google", "x", "--images"]) == 1


def test_serve_command_uses_config_defaults(monkeypatch, tmp_path) -> None:
    calls: dict = {}

    def fake_run(app, host, port):
        calls.update(app=app, host=host, port=port)

    monkeypatch.setattr("uvicorn.run", fake_run)
    monkeypatch.setenv("WEBSEARCH_PORT", "8765")

    assert cli.main(["--config", str(tmp_path / "none.json"), "serve"]) == 0
    assert calls["host"] == "127.0.0.1"
    assert calls["port"] == 8765
    assert calls["app"].state.orchestrator is not None
