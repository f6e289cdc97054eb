"""Pipeline orchestration: line sources in, rendered lines out.

Each line is parsed, schema-mapped, extracted, filtered and rendered before the
next one is requested.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass

from .color import ColorConfig
from .config import ViewerOptions, resolve_follow_interval
from .extract import extract_record
from .models import FormatToken
from .output import FileSink, OutputSink, StreamSink
from .parse import PlainLine, parse_line
from .render import render
from .schemas import Schema, field_mapping, schema_from_choice
from .sources import FileSource, FollowSource, LineSource, StdinSource
from .template import RenderContext, parse_template
from .timestamps import resolve_timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderPlan:
    """Everything computed once per run and shared by every record."""

    options: ViewerOptions
    tokens: Sequence[FormatToken]
    color: ColorConfig
    context: RenderContext

    @classmethod
    def build(cls, options: ViewerOptions, color: ColorConfig) -> RenderPlan:
        # Fail on a bad timezone before any input is read.
        resolve_timezone(options.tz)
        tokens = parse_template(options.format)
        return cls(
            options=options,
            tokens=tokens,
            color=color,
            context=RenderContext.build(
                tokens,
                add_fields=options.add_fields,
                omit_fields=options.omit_fields,
            ),
        )


async def iter_rendered(source: LineSource, plan: RenderPlan) -> AsyncIterator[str]:
    """Yield rendered output lines for one source, in input order.

    The schema is chosen from the first JSON line and reused for the rest of
    the source.
    """
    options = plan.options
    schema: Schema | None = None

    while (line := await source.next_line()) is not None:
        parsed = parse_line(line, options.non_json)
        if parsed is None:
            continue
        if isinstance(parsed, PlainLine):
            yield parsed.text
            continue

        if schema is None:
            schema = schema_from_choice(options.schema_choice, parsed.value)
            logger.debug("using %s schema (choice=%s)", schema.value, options.schema_choice)

        record = extract_record(
            parsed.value,
            field_mapping(schema),
            tz=options.tz,
            ts_format=options.ts_format,
        )

        # Records without a detected level are never filtered out.
        if (
            options.min_level is not None
            and record.level is not None
            and record.level < options.min_level
        ):
            continue

        yield render(record, plan.tokens, plan.color, options, plan.context)


def build_sources(options: ViewerOptions) -> list[LineSource]:
    """Create sources in processing order; a followed file always comes last."""
    if not options.files:
        return [StdinSource()]

    sources: list[LineSource] = [FileSource(p) for p in options.files]
    if options.follow:
        sources[-1] = FollowSource(options.files[-1], interval=resolve_follow_interval())
    return sources


async def process_source(source: LineSource, sink: OutputSink, plan: RenderPlan) -> None:
    """Render one source to completion (a followed source never completes)."""
    try:
        async for rendered in iter_rendered(source, plan):
            sink.write_line(rendered)
    finally:
        await source.aclose()


async def run(options: ViewerOptions, *, sources: Sequence[LineSource] | None = None) -> None:
    """Run the whole pipeline for the configured inputs and output."""
    resolve_timezone(options.tz)
    inputs = list(sources) if sources is not None else build_sources(options)

    sink: OutputSink
    if options.output is not None:
        sink = FileSink(options.output)
        color_stream = None
    else:
        sink = StreamSink()
        color_stream = sink.stream
    color = ColorConfig.for_mode(
        options.color,
        stream=color_stream,
        key_color=options.key_color,
        value_color=options.value_color,
    )

    try:
        plan = RenderPlan.build(options, color)
        for source in inputs:
            await process_source(source, sink, plan)
    finally:
        sink.close()
