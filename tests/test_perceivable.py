from __future__ import annotations

from typing import Any

import pytest

from bitvcheck.checks.perceivable import (
    ZOOM_CSS,
    check_alt_text,
    check_audio_description,
    check_form_labels,
    check_heading_structure,
    check_meaningful_sequence,
    check_media_alternative,
    check_non_text_contrast,
    check_reflow,
    check_resize_text,
    check_text_contrast,
    check_text_spacing,
    is_clipped,
    is_suspicious_alt,
    skipped_levels,
    surrounding_background,
)
from bitvcheck.core.config import AuditConfig
from bitvcheck.rules import perceivable as rules
from tests.conftest import FakePage, element, make_ctx, messages, run_check

_WHITE = "rgb(255, 255, 255)"
_BLACK = "rgb(0, 0, 0)"


def _img(alt: str | None, *, src: str = "a.png", role: str | None = None) -> dict[str, Any]:
    return element(f'img[src="{src}"]', tag="img", alt=alt, role=role, src=src)


def _heading(level: int, text: str = "Text") -> dict[str, Any]:
    return element(f"h{level}", level=level, text=text)


def _text(
    tag: str,
    text: str,
    color: str,
    background: str = _WHITE,
    *,
    size: str = "16px",
    weight: str = "400",
) -> dict[str, Any]:
    return element(
        tag,
        text=text,
        color=color,
        backgroundColor=background,
        fontSize=size,
        fontWeight=weight,
    )


# 1.1.1 Alternative text


async def test_missing_alt() -> None:
    errors = await run_check(check_alt_text, rules.R_1_1_1, {"images": [_img(None)]})
    assert messages(errors) == ["Missing alternative text"]
    assert errors[0].selector == 'img[src="a.png"]'
    assert errors[0].details == {"src": "a.png"}


async def test_empty_alt_is_missing() -> None:
    errors = await run_check(check_alt_text, rules.R_1_1_1, {"images": [_img("")]})
    assert messages(errors) == ["Missing alternative text"]


async def test_presentation_role_is_skipped() -> None:
    facts = {"images": [_img(None, role="presentation")]}
    assert await run_check(check_alt_text, rules.R_1_1_1, facts) == []


async def test_suspicious_alt() -> None:
    errors = await run_check(check_alt_text, rules.R_1_1_1, {"images": [_img("image")]})
    assert messages(errors) == ['Suspicious alternative text: "image"']


async def test_descriptive_alt_passes() -> None:
    facts = {"images": [_img("Team photo in front of the office")]}
    assert await run_check(check_alt_text, rules.R_1_1_1, facts) == []


@pytest.mark.parametrize(
    ("alt", "suspicious"),
    [
        pytest.param("Logo", True, id="too-short"),
        pytest.param("x" * 151, True, id="too-long"),
        pytest.param("IMAGE", True, id="placeholder-word"),
        pytest.param("img12.jpg", True, id="file-name"),
        pytest.param("Graphic", True, id="graphic"),
        pytest.param("Company logo", False, id="descriptive"),
        pytest.param("x" * 150, False, id="max-length"),
    ],
)
def test_is_suspicious_alt(alt: str, suspicious: bool) -> None:
    assert is_suspicious_alt(alt) is suspicious


# 1.2.3 / 1.2.5 Media


async def test_video_without_tracks() -> None:
    facts = {"videos": [element("video", src="clip.mp4", textTracks=0)]}
    errors = await run_check(check_media_alternative, rules.R_1_2_3, facts)
    assert messages(errors) == ["No audio description or captions found"]


async def test_video_with_tracks_passes() -> None:
    facts = {"videos": [element("video", src="clip.mp4", textTracks=1)]}
    assert await run_check(check_media_alternative, rules.R_1_2_3, facts) == []


async def test_unreachable_description_track() -> None:
    facts = {"description-tracks": [element("video", src="v.mp4", declared=2, reachable=0)]}
    errors = await run_check(check_audio_description, rules.R_1_2_5, facts)
    assert messages(errors) == ["Audio description tracks cannot be loaded"]


@pytest.mark.parametrize(
    ("declared", "reachable"),
    [
        pytest.param(0, 0, id="no-tracks"),
        pytest.param(2, 1, id="one-reachable"),
    ],
)
async def test_description_track_ok(declared: int, reachable: int) -> None:
    facts = {
        "description-tracks": [
            element("video", src="v.mp4", declared=declared, reachable=reachable),
        ],
    }
    assert await run_check(check_audio_description, rules.R_1_2_5, facts) == []


async def test_description_track_fetch_is_bounded() -> None:
    timeouts: list[Any] = []

    def tracks(_page: Any, timeout_ms: Any) -> list[dict[str, Any]]:
        timeouts.append(timeout_ms)
        return []

    config = AuditConfig(visibility_timeout=2.5)
    facts = {"description-tracks": tracks}
    assert await run_check(check_audio_description, rules.R_1_2_5, facts, config=config) == []
    assert timeouts == [2500.0]


# 1.3.1 Form labels


def _field(**facts: Any) -> dict[str, Any]:
    base = {
        "type": "text",
        "visible": True,
        "hasLabel": False,
        "ariaLabel": False,
        "ariaLabelledby": False,
        "title": False,
        "placeholder": False,
        "required": False,
        "validation": False,
        "ariaInvalid": False,
        "inForm": True,
        "excluded": False,
    }
    return element('input[name="email"]', tag="input", **{**base, **facts})


async def test_unlabelled_field() -> None:
    errors = await run_check(check_form_labels, rules.R_1_3_1, {"form-fields": [_field()]})
    assert messages(errors) == ["No programmatically determinable label"]


@pytest.mark.parametrize(
    "facts",
    [
        pytest.param({"hasLabel": True}, id="label"),
        pytest.param({"ariaLabel": True}, id="aria-label"),
        pytest.param({"ariaLabelledby": True}, id="aria-labelledby"),
        pytest.param({"type": "hidden"}, id="hidden-input"),
        pytest.param({"visible": False}, id="not-visible"),
    ],
)
async def test_form_field_passes(facts: dict[str, Any]) -> None:
    assert await run_check(check_form_labels, rules.R_1_3_1, {"form-fields": [_field(**facts)]}) == []


# 1.3.1a Heading structure


async def test_skipped_heading_level() -> None:
    facts = {"headings": [_heading(1), _heading(3)]}
    errors = await run_check(check_heading_structure, rules.R_1_3_1A, facts)
    assert len(errors) == 1
    assert "H1 to H3" in errors[0].message
    assert errors[0].selector == "h3"


async def test_sequential_headings_pass() -> None:
    facts = {"headings": [_heading(1), _heading(2), _heading(3)]}
    assert await run_check(check_heading_structure, rules.R_1_3_1A, facts) == []


@pytest.mark.parametrize(
    ("levels", "expected"),
    [
        pytest.param([], [], id="empty"),
        pytest.param([2], [], id="first-heading-may-be-any-level"),
        pytest.param([1, 2, 1, 2], [], id="going-back-up"),
        pytest.param([1, 4], [(1, 1, 4)], id="skip-two"),
        pytest.param([1, 3, 4], [(1, 1, 3)], id="reported-once"),
        pytest.param([1, 3, 1, 3], [(1, 1, 3), (3, 1, 3)], id="repeated"),
    ],
)
def test_skipped_levels(levels: list[int], expected: list[tuple[int, int, int]]) -> None:
    assert skipped_levels(levels) == expected


# 1.3.2 Meaningful sequence


async def test_positioned_button_with_z_index() -> None:
    facts = {
        "positioned-elements": [
            element("button", position="absolute", zIndex="10", onclick=False, role=None),
        ],
    }
    errors = await run_check(check_meaningful_sequence, rules.R_1_3_2, facts)
    assert messages(errors) == ["Positioned interactive element could interfere with reading order"]


@pytest.mark.parametrize(
    "el",
    [
        pytest.param(
            element("button", position="absolute", zIndex="auto", onclick=False, role=None),
            id="auto-z-index",
        ),
        pytest.param(
            element("div", position="fixed", zIndex="5", onclick=False, role=None),
            id="not-interactive",
        ),
    ],
)
async def test_positioned_element_passes(el: dict[str, Any]) -> None:
    facts = {"positioned-elements": [el]}
    assert await run_check(check_meaningful_sequence, rules.R_1_3_2, facts) == []


async def test_positioned_div_with_onclick() -> None:
    facts = {
        "positioned-elements": [
            element("div", position="fixed", zIndex="5", onclick=True, role=None),
        ],
    }
    assert len(await run_check(check_meaningful_sequence, rules.R_1_3_2, facts)) == 1


# 1.4.3 Text contrast


async def test_low_contrast_paragraph() -> None:
    facts = {"text-colors": [_text("p", "Some body text", "rgb(170, 170, 170)")]}
    errors = await run_check(check_text_contrast, rules.R_1_4_3, facts)
    assert len(errors) == 1
    record = errors[0]
    assert record.message.startswith("Contrast too low: 2.32 < 4.5")
    assert record.text == "Some body text"
    assert record.foreground_color == "rgb(170, 170, 170)"
    assert record.background_color == _WHITE
    assert record.details["required"] == 4.5


async def test_sufficient_contrast_passes() -> None:
    facts = {"text-colors": [_text("p", "Some body text", _BLACK)]}
    assert await run_check(check_text_contrast, rules.R_1_4_3, facts) == []


async def test_large_text_uses_lower_threshold() -> None:
    # 3.95:1, below 4.5 but above 3.0
    color = "rgb(128, 128, 128)"
    facts = {"text-colors": [_text("p", "Large text", color, size="24px")]}
    assert await run_check(check_text_contrast, rules.R_1_4_3, facts) == []
    facts = {"text-colors": [_text("p", "Small text", color)]}
    assert len(await run_check(check_text_contrast, rules.R_1_4_3, facts)) == 1


async def test_bold_text_at_fourteen_pixels_is_large() -> None:
    facts = {"text-colors": [_text("p", "Bold text", "rgb(128, 128, 128)", size="14px", weight="700")]}
    assert await run_check(check_text_contrast, rules.R_1_4_3, facts) == []


async def test_headings_use_lower_threshold() -> None:
    facts = {"text-colors": [_text("h2", "Title", "rgb(128, 128, 128)")]}
    assert await run_check(check_text_contrast, rules.R_1_4_3, facts) == []


async def test_short_text_skipped_unless_heading_or_button() -> None:
    light = "rgb(230, 230, 230)"
    facts = {"text-colors": [_text("a", "Go", light)]}
    assert await run_check(check_text_contrast, rules.R_1_4_3, facts) == []
    facts = {"text-colors": [_text("button", "OK", light)]}
    assert len(await run_check(check_text_contrast, rules.R_1_4_3, facts)) == 1


async def test_submit_input_is_sampled() -> None:
    submit = element(
        'input[name="go"]',
        tag="input",
        text="Go",
        color="rgb(230, 230, 230)",
        backgroundColor=_WHITE,
        fontSize="16px",
        fontWeight="400",
    )
    errors = await run_check(check_text_contrast, rules.R_1_4_3, {"text-colors": [submit]})
    assert len(errors) == 1
    assert errors[0].text == "Go"


async def test_tolerance_applies() -> None:
    # 4.48:1 on white passes with the default 0.2 tolerance
    facts = {"text-colors": [_text("p", "Body text", "rgb(119, 119, 119)")]}
    assert await run_check(check_text_contrast, rules.R_1_4_3, facts) == []
    strict = AuditConfig(contrast_tolerance=0.0)
    assert len(await run_check(check_text_contrast, rules.R_1_4_3, facts, config=strict)) == 1


async def test_transparent_background_not_checked() -> None:
    facts = {"text-colors": [_text("p", "Body text", _WHITE, "rgba(0, 0, 0, 0)")]}
    assert await run_check(check_text_contrast, rules.R_1_4_3, facts) == []


async def test_unparseable_foreground_skipped() -> None:
    facts = {"text-colors": [_text("p", "Body text", "color(srgb 1 0 0)")]}
    assert await run_check(check_text_contrast, rules.R_1_4_3, facts) == []


# 1.4.4 / 1.4.12 Text resize and spacing


def _clipped(**facts: Any) -> dict[str, Any]:
    base = {
        "overflowX": "visible",
        "overflowY": "hidden",
        "scrollWidth": 100,
        "clientWidth": 100,
        "scrollHeight": 60,
        "clientHeight": 40,
    }
    return element(".teaser", tag="div", **{**base, **facts})


@pytest.mark.parametrize(
    ("facts", "clipped"),
    [
        pytest.param({}, True, id="vertical"),
        pytest.param({"overflowY": "auto"}, False, id="scrollable"),
        pytest.param({"scrollHeight": 40}, False, id="fits"),
        pytest.param(
            {"overflowX": "hidden", "overflowY": "visible", "scrollWidth": 120},
            True,
            id="horizontal",
        ),
    ],
)
def test_is_clipped(facts: dict[str, Any], clipped: bool) -> None:
    assert is_clipped(_clipped(**facts)) is clipped


def _zoom_dependent(normal: Any, zoomed: Any) -> Any:
    def answer(page: FakePage, _arg: Any) -> Any:
        return zoomed if ZOOM_CSS in page.styles.values() else normal

    return answer


async def test_resize_text_horizontal_scroll() -> None:
    page = FakePage(
        {
            "body-box": _zoom_dependent({"width": 1000, "height": 800}, {"width": 1200, "height": 1600}),
        },
    )
    errors = await check_resize_text(make_ctx(page, rules.R_1_4_4))
    assert messages(errors) == ["Horizontal scrolling required at 200% text size"]
    assert errors[0].selector == "body"
    assert errors[0].details == {"baseline_width": 1000, "zoomed_width": 1200}


async def test_resize_text_within_tolerance() -> None:
    page = FakePage(
        {
            "body-box": _zoom_dependent({"width": 1000, "height": 800}, {"width": 1100, "height": 1600}),
        },
    )
    assert await check_resize_text(make_ctx(page, rules.R_1_4_4)) == []


async def test_resize_text_clipped_while_zoomed() -> None:
    page = FakePage({"clipped-text": _zoom_dependent([], [_clipped()])})
    errors = await check_resize_text(make_ctx(page, rules.R_1_4_4))
    assert messages(errors) == ["Text is cut off at 200% text size"]


async def test_resize_text_removes_stylesheet() -> None:
    page = FakePage()
    await check_resize_text(make_ctx(page, rules.R_1_4_4))
    assert page.styles == {}
    assert page.evaluated.count("add-style") == 1
    assert page.evaluated.count("remove-style") == 1


async def test_resize_text_removes_stylesheet_on_failure() -> None:
    def broken(page: FakePage, _arg: Any) -> Any:
        if page.styles:
            msg = "Execution context was destroyed"
            raise RuntimeError(msg)
        return {"width": 1000, "height": 800}

    page = FakePage({"body-box": broken})
    with pytest.raises(RuntimeError):
        await check_resize_text(make_ctx(page, rules.R_1_4_4))
    assert page.styles == {}


async def test_text_spacing_clipped() -> None:
    def answer(page: FakePage, _arg: Any) -> list[dict[str, Any]]:
        return [_clipped()] if page.styles else [_clipped(scrollHeight=40)]

    page = FakePage({"clipped-text": answer})
    errors = await check_text_spacing(make_ctx(page, rules.R_1_4_12))
    assert messages(errors) == ["Text is cut off with increased text spacing"]
    assert page.styles == {}


async def test_text_spacing_passes() -> None:
    assert await run_check(check_text_spacing, rules.R_1_4_12) == []


# 1.4.10 Reflow


def _layout(page: FakePage, _arg: Any) -> dict[str, Any]:
    width = page.viewport_size["width"] if page.viewport_size else 0
    if width != 320:
        return {"viewportWidth": width, "scrollWidth": width, "overflowing": []}
    return {
        "viewportWidth": 320,
        "scrollWidth": 800,
        "overflowing": [element("table", right=800)],
    }


async def test_reflow_reports_overflow() -> None:
    page = FakePage({"reflow": _layout})
    errors = await check_reflow(make_ctx(page, rules.R_1_4_10))
    assert messages(errors) == [
        "Horizontal scrolling required at 320 CSS pixels width",
        "Content extends beyond the viewport at 320 CSS pixels width",
    ]
    assert errors[0].selector == "html"
    assert errors[1].selector == "table"


async def test_reflow_restores_viewport() -> None:
    page = FakePage({"reflow": _layout}, viewport={"width": 1280, "height": 720})
    await check_reflow(make_ctx(page, rules.R_1_4_10))
    assert page.viewport_history == [
        {"width": 320, "height": 256},
        {"width": 1280, "height": 720},
    ]
    assert page.viewport_size == {"width": 1280, "height": 720}


async def test_reflow_restores_viewport_on_failure() -> None:
    def broken(page: FakePage, _arg: Any) -> Any:
        msg = "page crashed"
        raise RuntimeError(msg)

    page = FakePage({"reflow": broken})
    with pytest.raises(RuntimeError):
        await check_reflow(make_ctx(page, rules.R_1_4_10))
    assert page.viewport_size == {"width": 1920, "height": 1080}


async def test_reflow_passes() -> None:
    assert await run_check(check_reflow, rules.R_1_4_10) == []


# 1.4.11 Non-text contrast


def _control(**facts: Any) -> dict[str, Any]:
    base = {
        "borderColor": _BLACK,
        "borderStyle": "solid",
        "borderWidth": "1px",
        "backgroundColor": "rgba(0, 0, 0, 0)",
        "ancestorBackgrounds": ["rgba(0, 0, 0, 0)", _WHITE],
    }
    return element('input[name="q"]', tag="input", **{**base, **facts})


async def test_low_contrast_control() -> None:
    facts = {"control-colors": [_control(borderColor="rgb(230, 230, 230)")]}
    errors = await run_check(check_non_text_contrast, rules.R_1_4_11, facts)
    assert len(errors) == 1
    assert errors[0].message.startswith("Control boundary contrast too low")
    assert errors[0].background_color == _WHITE


@pytest.mark.parametrize(
    "facts",
    [
        pytest.param({}, id="dark-border"),
        pytest.param(
            {"borderColor": "rgb(230, 230, 230)", "backgroundColor": "rgb(0, 80, 160)"},
            id="dark-fill",
        ),
        pytest.param(
            {"borderStyle": "none", "backgroundColor": "rgba(0, 0, 0, 0)"},
            id="no-boundary-to-measure",
        ),
    ],
)
async def test_control_contrast_passes(facts: dict[str, Any]) -> None:
    facts_ = {"control-colors": [_control(**facts)]}
    assert await run_check(check_non_text_contrast, rules.R_1_4_11, facts_) == []


async def test_invisible_border_ignored() -> None:
    control = _control(borderWidth="0px", backgroundColor="rgb(240, 240, 240)")
    errors = await run_check(check_non_text_contrast, rules.R_1_4_11, {"control-colors": [control]})
    assert len(errors) == 1
    assert errors[0].foreground_color == "rgb(240, 240, 240)"


@pytest.mark.parametrize(
    ("ancestors", "expected"),
    [
        pytest.param([], _WHITE, id="default"),
        pytest.param(["rgba(0, 0, 0, 0)", "rgb(0, 0, 0)"], _BLACK, id="first-opaque"),
        pytest.param(["bogus", "rgb(1, 2, 3)"], "rgb(1, 2, 3)", id="unparseable-skipped"),
    ],
)
def test_surrounding_background(ancestors: list[str], expected: str) -> None:
    assert surrounding_background(ancestors) == expected
