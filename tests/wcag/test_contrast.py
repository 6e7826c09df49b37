import pytest

from a11yscan.wcag.detectors import get_detector
from a11yscan.wcag.detectors.colors import contrast_ratio, parse_color, relative_luminance
from a11yscan.wcag.findings import Impact


def run_contrast(document):
    return get_detector("color-contrast")(document, "https://example.com/page")


class TestColorParsing:

    @pytest.mark.parametrize("value,expected", [
        ("rgb(119, 119, 119)", (119.0, 119.0, 119.0, 1.0)),
        ("rgba(0, 0, 0, 0)", (0.0, 0.0, 0.0, 0.0)),
        ("rgb(10 20 30 / 50%)", (10.0, 20.0, 30.0, 0.5)),
        ("#fff", (255.0, 255.0, 255.0, 1.0)),
        ("#000000", (0.0, 0.0, 0.0, 1.0)),
        ("White", (255.0, 255.0, 255.0, 1.0)),
        ("transparent", (0.0, 0.0, 0.0, 0.0)),
    ])
    def test_parse(self, value, expected):
        assert parse_color(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [None, "", "hsl(0, 0%, 50%)", "#12", "rgb(1, 2)", "chartreuse"])
    def test_unparseable(self, value):
        assert parse_color(value) is None


class TestContrastMath:

    def test_black_on_white(self):
        assert contrast_ratio((0, 0, 0), (255, 255, 255)) == pytest.approx(21.0)

    def test_symmetric(self):
        assert contrast_ratio((119, 119, 119), (255, 255, 255)) == contrast_ratio((255, 255, 255), (119, 119, 119))

    def test_grey_119(self):
        assert relative_luminance((119, 119, 119)) == pytest.approx(0.1845, abs=1e-3)
        assert contrast_ratio((119, 119, 119), (255, 255, 255)) == pytest.approx(4.48, abs=0.01)


class TestContrastDetector:

    def test_contrast_scenario(self, rendered_doc, make_style):
        """rgb(119,119,119) on white at 14px regular is below 4.5:1"""
        document = rendered_doc(
            '<div id="box"><p id="grey">Low contrast text</p></div>',
            styles={
                "box": make_style(background="rgb(255, 255, 255)"),
                "grey": make_style(color="rgb(119, 119, 119)", font_size="14px", font_weight="400"),
            }
        )
        findings = run_contrast(document)
        assert len(findings) == 1
        finding = findings[0]
        assert finding.impact is Impact.SERIOUS
        assert finding.message == "Insufficient color contrast: 4.48:1 (required: 4.5:1)"
        assert finding.auxiliary_data["contrast_ratio"] == pytest.approx(4.48)
        assert finding.auxiliary_data["background_color"] == "rgb(255, 255, 255)"
        assert finding.element_locator == "#grey"

    def test_large_text_uses_lower_threshold(self, rendered_doc, make_style):
        document = rendered_doc(
            '<h1 id="big">Heading</h1><p id="bold">Bold text</p>',
            styles={
                "big": make_style(color="rgb(119, 119, 119)", font_size="24px"),
                "bold": make_style(color="rgb(119, 119, 119)", font_size="14px", font_weight="700"),
            }
        )
        assert run_contrast(document) == []

    def test_default_background_is_white(self, rendered_doc, make_style):
        document = rendered_doc(
            '<span id="faint">faint</span>',
            styles={"faint": make_style(color="rgb(200, 200, 200)")}
        )
        findings = run_contrast(document)
        assert len(findings) == 1
        assert findings[0].auxiliary_data["large_text"] is False

    def test_background_from_ancestor(self, rendered_doc, make_style):
        document = rendered_doc(
            '<div id="dark"><p id="light">readable</p></div>',
            styles={
                "dark": make_style(background="rgb(0, 0, 0)"),
                "light": make_style(color="rgb(255, 255, 255)"),
            }
        )
        assert run_contrast(document) == []

    def test_hidden_and_unreadable_skipped(self, rendered_doc, make_style):
        document = rendered_doc(
            '<p id="hidden">hidden</p><p id="odd">odd color</p><p id="empty">  </p>',
            styles={
                "hidden": make_style(color="rgb(250, 250, 250)", display="none"),
                "odd": make_style(color="hsl(0, 0%, 98%)"),
                "empty": make_style(color="rgb(250, 250, 250)"),
            }
        )
        assert run_contrast(document) == []

    def test_only_elements_with_own_text(self, rendered_doc, make_style):
        document = rendered_doc(
            '<li id="item"><a id="inner" href="/x">link</a></li>',
            styles={
                "item": make_style(color="rgb(250, 250, 250)"),
                "inner": make_style(color="rgb(0, 0, 0)"),
            }
        )
        assert run_contrast(document) == []
