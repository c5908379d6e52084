from rewriter import TextRewriter, find_tags

from conftest import KEYS


def test_find_tags_in_order_without_duplicates():
    assert find_tags("Press [A] or [B], then [A]") == ["A", "B"]


def test_find_tags_skips_unterminated():
    assert find_tags("broken [A and [B] fine") == ["A and [B", "B"]
    assert find_tags("trailing [open") == []
    assert find_tags("[ok] then [open") == ["ok"]


def test_find_tags_custom_delimiters():
    assert find_tags("Hit {Player/Jump}!", "{", "}") == ["Player/Jump"]


def test_format_single_tag_round_trip(system):
    assert system.format("[Player/Jump]") == "<g:G1>"


def test_format_replaces_identical_tags_everywhere(system):
    assert system.format("[Player/Jump] and [Player/Jump]") == "<g:G1> and <g:G1>"


def test_format_composite_concatenates(system):
    system.device_source.press(KEYS)
    assert system.format("Move: [Player/Move]") == "Move: <g:K_W><g:K_S><g:K_A><g:K_D>"


def test_failures_are_embedded_and_do_not_stop_other_tags(system):
    out = system.format("[Player/Fly] [Player/Jump] [Player/Cancel] [oops")
    assert out == "MISSING_ACTION player/fly <g:G1> MISSING_PROMPT 'Player/Cancel' [oops"


def test_sheet_token_and_rich_text_tags(system):
    rewriter = TextRewriter(
        system.resolver,
        template='<sprite="{SHEET}" name="{SPRITE}">',
        rich_text_tags=' tint=1',
    )
    assert rewriter.format("[Player/Jump]") == '<sprite="xbox_sheet" name="G1"> tint=1'


def test_empty_template_falls_back_to_glyph(system):
    rewriter = TextRewriter(system.resolver, template="")
    assert rewriter.format("Jump: [Player/Jump]") == "Jump: G1"


def test_text_without_tags_is_unchanged(system):
    assert system.format("nothing to see") == "nothing to see"


def test_rendered_text_is_not_rewritten_by_later_tags(system):
    rewriter = TextRewriter(system.resolver, open_tag="<", close_tag=">", template="<g:{SPRITE}>")
    assert rewriter.format("<Player/Jump> <g:G1>") == "<g:G1> MISSING_ACTION g:g1"
