from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from json_log_viewer.core.color import ColorConfig
from json_log_viewer.core.config import ViewerOptions
from json_log_viewer.core.errors import LineParseError, TimezoneError
from json_log_viewer.core.models import Level
from json_log_viewer.core.pipeline import RenderPlan, build_sources, iter_rendered, run
from json_log_viewer.core.sources import FileSource, FollowSource, StdinSource


def _stdin(lines: list[str]) -> StdinSource:
    return StdinSource(io.BytesIO("".join(line + "\n" for line in lines).encode("utf-8")))


async def _collect(lines: list[str], **overrides) -> list[str]:
    options = ViewerOptions(color="never", tz="utc", **overrides)
    plan = RenderPlan.build(options, ColorConfig(enabled=False))
    return [out async for out in iter_rendered(_stdin(lines), plan)]


@pytest.mark.asyncio
async def test_min_level_filters_in_order(logstash_lines) -> None:
    lines = [json.dumps(r) for r in logstash_lines]
    out = await _collect(lines, min_level=Level.WARN)

    assert len(out) == 1
    assert out[0].startswith("10:30:01.250 ERROR [c.e.s.Handler] error msg")
    assert "\n    java.lang.IllegalStateException: boom" in out[0]


@pytest.mark.asyncio
async def test_records_without_level_bypass_filter() -> None:
    lines = [json.dumps({"message": "no level"}), json.dumps({"level": "DEBUG", "message": "dbg"})]
    out = await _collect(lines, min_level="INFO", format="{message}")
    assert out == ["no level"]


@pytest.mark.asyncio
async def test_raw_json_round_trips(logstash_lines) -> None:
    lines = [json.dumps(r) for r in logstash_lines]
    out = await _collect(lines, raw_json=True)
    assert [json.loads(o) for o in out] == logstash_lines


@pytest.mark.asyncio
async def test_raw_json_escapes_terminal_controls() -> None:
    value = {"msg": "\u009b31mred\u007f", "ok": "caf\u00e9"}
    out = await _collect([json.dumps(value)], raw_json=True)

    assert out == ['{"msg":"\\u009b31mred\\u007f","ok":"caf\u00e9"}']
    assert json.loads(out[0]) == value


@pytest.mark.asyncio
async def test_non_json_passthrough_is_sanitized() -> None:
    out = await _collect(["plain \x1b[31mtext", '{"message":"m"}'], format="{message}")
    assert out == ["plain [31mtext", "m"]


@pytest.mark.asyncio
async def test_non_json_skip() -> None:
    out = await _collect(["garbage", "", '{"message":"m"}'], non_json="skip", format="{message}")
    assert out == ["m"]


@pytest.mark.asyncio
async def test_non_json_fail() -> None:
    with pytest.raises(LineParseError, match="not valid JSON: garbage"):
        await _collect(['{"message":"m"}', "garbage"], non_json="fail")


@pytest.mark.asyncio
async def test_schema_chosen_once_per_source() -> None:
    # The first line looks like Bunyan; the second is read with the same mapping.
    lines = [
        json.dumps({"v": 0, "level": 30, "name": "svc", "msg": "first"}),
        json.dumps({"level": 50, "msg": "second", "message": "ignored"}),
    ]
    out = await _collect(lines, format="{level} {message}")
    assert out == ["INFO first", "ERROR second"]


@pytest.mark.asyncio
async def test_forced_schema() -> None:
    lines = [json.dumps({"level": "info", "msg": "bunyan msg", "message": "logstash msg"})]
    assert await _collect(lines, schema_choice="bunyan", format="{message}") == ["bunyan msg"]
    assert await _collect(lines, schema_choice="logstash", format="{message}") == ["logstash msg"]


@pytest.mark.asyncio
async def test_non_object_json_rendered_as_message() -> None:
    out = await _collect(["[1, 2]", '"hi"'], format="{message}")
    assert out == ["[1,2]", '"hi"']


def test_plan_rejects_unknown_timezone() -> None:
    options = ViewerOptions(tz="Not/AZone")
    with pytest.raises(TimezoneError):
        RenderPlan.build(options, ColorConfig())


def test_build_sources(tmp_path: Path) -> None:
    assert isinstance(build_sources(ViewerOptions())[0], StdinSource)

    files = (tmp_path / "a.log", tmp_path / "b.log")
    plain = build_sources(ViewerOptions(files=files))
    assert [type(s) for s in plain] == [FileSource, FileSource]

    followed = build_sources(ViewerOptions(files=files, follow=True))
    assert [type(s) for s in followed] == [FileSource, FollowSource]
    assert followed[-1].path == files[-1]


@pytest.mark.asyncio
async def test_run_writes_output_file(tmp_path: Path, write_jsonl, logstash_lines) -> None:
    first = tmp_path / "a.log"
    second = tmp_path / "b.log"
    out = tmp_path / "out.txt"
    write_jsonl(first, logstash_lines[:1])
    write_jsonl(second, logstash_lines[1:])

    options = ViewerOptions(
        files=(first, second),
        output=out,
        color="always",
        tz="utc",
        format="{level} {message}",
        omit_fields="stack_trace",
    )
    await run(options)

    text = out.read_text(encoding="utf-8")
    assert text == "\x1b[34mDEBUG\x1b[0m debug msg\n\x1b[31mERROR\x1b[0m error msg " + (
        "\x1b[35mhost\x1b[0m\x1b[2m=\x1b[0m\x1b[36mserver1\x1b[0m\n"
    )


@pytest.mark.asyncio
async def test_run_auto_color_off_for_file_output(tmp_path: Path, write_jsonl, logstash_lines) -> None:
    path = tmp_path / "a.log"
    out = tmp_path / "out.txt"
    write_jsonl(path, logstash_lines)

    await run(ViewerOptions(files=(path,), output=out, tz="utc"))
    assert "\x1b" not in out.read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_run_unknown_timezone_reads_nothing(tmp_path: Path) -> None:
    out = tmp_path / "out.txt"
    with pytest.raises(TimezoneError):
        await run(ViewerOptions(files=(tmp_path / "missing.log",), output=out, tz="Bad/Zone"))
    assert not out.exists()


@pytest.mark.asyncio
async def test_lone_surrogate_escape_is_not_json() -> None:
    lines = ['{"msg":"\\ud800 bad"}', '{"msg":"\\ud83d\\ude00 ok"}', '{"msg":"after"}']
    out = await _collect(lines, format="{message}")
    assert out == ['{"msg":"\\ud800 bad"}', "\U0001f600 ok", "after"]

    assert await _collect(lines, format="{message}", non_json="skip") == ["\U0001f600 ok", "after"]


@pytest.mark.asyncio
async def test_run_continues_past_lone_surrogate(tmp_path: Path) -> None:
    src = tmp_path / "a.log"
    out = tmp_path / "out.txt"
    src.write_text('{"msg":"\\udc00"}\n{"msg":"after"}\n', encoding="utf-8")

    await run(ViewerOptions(files=(src,), output=out, tz="utc", format="{message}"))
    assert out.read_text(encoding="utf-8") == '{"msg":"\\udc00"}\nafter\n'
