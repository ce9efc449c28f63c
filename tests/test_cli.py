import json

from palette_recolor.cli import main
from palette_recolor.utils import log


def _write(tmp_path, payload) -> str:
    path = tmp_path / "drawing.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


DOC = {
    "colours": [{"hex": "#fe0100", "weight": 5, "label": "roof"}, {"hex": "#010001"}],
    "palette": ["#ff0000", {"hex": "#00ff00", "label": "Green"}, "#0000ff"],
    "config": {"K": 2, "ITER": 50},
}


def test_cli_stdout_json(tmp_path, capsys) -> None:
    assert main([_write(tmp_path, DOC), "--seed", "7"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["mapping"]["#fe0100"] == 0
    assert payload["active_count"] == 2
    assert payload["hex_map"]["#fe0100"] == "#ff0000"


def test_cli_out_and_swatch(tmp_path, capsys) -> None:
    out = tmp_path / "mapping.json"
    swatch = tmp_path / "swatch.png"
    code = main([_write(tmp_path, DOC), "--out", str(out), "--swatch", str(swatch), "--iter", "10"])
    assert code == 0
    assert json.loads(out.read_text(encoding="utf-8"))["mapping"]["#010001"] in (1, 2)
    assert swatch.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
    text = capsys.readouterr().out
    assert "ITER: 10" in text
    assert "roof" in text


def test_cli_palette_file_overrides(tmp_path, capsys) -> None:
    pal = tmp_path / "palette.json"
    pal.write_text(json.dumps({"palette": ["#000000", "#ff0000"]}), encoding="utf-8")
    assert main([_write(tmp_path, DOC), "--palette", str(pal)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["mapping"] == {"#fe0100": 1, "#010001": 0}


def test_cli_bad_config_exits_2(tmp_path, capsys) -> None:
    doc = dict(DOC, config={"K": 0})
    assert main([_write(tmp_path, doc)]) == 2
    assert "[error]" in capsys.readouterr().err


def test_cli_empty_palette_exits_2(tmp_path, capsys) -> None:
    doc = dict(DOC, palette=[])
    assert main([_write(tmp_path, doc)]) == 2
    assert "palette" in capsys.readouterr().err


def test_cli_missing_file_exits_2(tmp_path, capsys) -> None:
    assert main([str(tmp_path / "missing.json")]) == 2


def test_cli_stdout_stays_json_with_warnings_and_debug(tmp_path, capsys) -> None:
    doc = dict(DOC, colours=["#zzzzzz", "#fe0100"])
    assert main([_write(tmp_path, doc), "--debug"]) == 0
    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert payload["mapping"] == {"#fe0100": 0}
    assert "[warn]" in captured.err
    assert "[debug]" in captured.err


def test_cli_logs_back_on_stdout_after_run(tmp_path, capsys) -> None:
    assert main([_write(tmp_path, DOC)]) == 0
    capsys.readouterr()
    log("after")
    assert capsys.readouterr().out == "after\n"


def test_cli_invalid_utf8_exits_2(tmp_path, capsys) -> None:
    path = tmp_path / "drawing.json"
    path.write_bytes(b'{"colours": ["\xff"]}')
    assert main([str(path)]) == 2
    assert "UTF-8" in capsys.readouterr().err
