from __future__ import annotations

import pytest

from morse_codec.charsets import CharacterSet
from morse_codec.codec import characters, decode, encode
from morse_codec.options import Options, drop, replace_with
from morse_codec.registry import default_registry

PANGRAM = "the quick brown fox jumps over the lazy dog"
PANGRAM_MORSE = (
    "- .... . / --.- ..- .. -.-. -.- / -... .-. --- .-- -. / ..-. --- -..- / "
    ".--- ..- -- .--. ... / --- ...- . .-. / - .... . / .-.. .- --.. -.-- / -.. --- --."
)


def _bullet_options() -> Options:
    return Options(dash="–", dot="•", space="\\")


def test_sos_words_and_letters_are_separated():
    assert encode("SOS SOS") == "... --- ... / ... --- ..."
    assert decode("... --- ... / ... --- ...") == "SOS SOS"


def test_encodes_english_alphabet():
    assert encode(PANGRAM) == PANGRAM_MORSE
    assert encode(PANGRAM, _bullet_options()) == (
        "– •••• • \\ ––•– ••– •• –•–• –•– \\ –••• •–• ––– •–– –• \\ ••–• ––– –••– \\ "
        "•––– ••– –– •––• ••• \\ ––– •••– • •–• \\ – •••• • \\ •–•• •– ––•• –•–– \\ –•• ––– ––•"
    )


def test_decodes_english_alphabet():
    assert decode(PANGRAM_MORSE) == PANGRAM.upper()
    assert decode(encode(PANGRAM, _bullet_options()), _bullet_options()) == PANGRAM.upper()


def test_decodes_numbers():
    assert decode("----- .---- ..--- ...-- ....- ..... -.... --... ---.. ----.") == "0123456789"


def test_punctuation_both_ways():
    assert encode(".,?'!/(") == ".-.-.- --..-- ..--.. .----. -.-.-- -..-. -.--."
    assert encode(")&:;=¿¡") == "-.--.- .-... ---... -.-.-. -...- ..-.- --...-"
    assert decode(".-.-.- --..-- ..--.. .----. -.-.-- -..-. -.--.") == ".,?'!/("
    assert decode("-.--.- .-... ---... -.-.-. -...- ..-.- --...-") == ")&:;=¿¡"


def test_encodes_extended_latin():
    assert encode("ÃÁÅÀÂÄ") == ".--.- .--.- .--.- .--.- .--.- .-.-"
    assert encode("ĄÆÇĆĈČ") == ".-.- .-.- -.-.. -.-.. -.-.. --."
    assert encode("ÒÖÔØŚŞ") == "---. ---. ---. ---. ...-... .--.."
    # uppercasing turns the sharp s into "SS"
    assert encode("ȘŠŜßÞÜ") == "---- ---- ...-. ... ... .--.. ..--"


def test_whitespace_runs_collapse():
    assert encode("A  B") == encode("A B")
    assert encode("  A \t B\n") == ".- / -..."
    assert encode("") == ""
    assert encode("   ") == ""


def test_encoding_is_case_insensitive():
    assert encode("hello") == encode("HELLO")
    assert encode("привет") == ".--. .-. .. .-- . -"


def test_unknown_character_passes_through_in_place():
    assert encode("A%B") == ".- % -..."
    assert encode("SOS %") == "... --- ... / %"


def test_invalid_handler_can_replace_or_drop():
    assert encode("A%B", Options(invalid_char_callback=replace_with("?"))) == ".- ? -..."
    assert encode("A%B", Options(invalid_char_callback=drop)) == ".- -..."
    assert encode("% A", Options(invalid_char_callback=drop)) == ".-"


def test_malformed_glyph_routes_through_handler():
    assert decode("... x-. ---") == "S#O"
    assert decode("... x-. ---", Options(invalid_char_callback=drop)) == "SO"
    assert decode("... x-. ---", Options(invalid="?")) == "S?O"


def test_unknown_pattern_routes_through_handler():
    assert decode("........ ...") == "#S"
    seen = []

    def _record(char: str) -> str:
        seen.append(char)
        return "*"

    assert decode("........", Options(invalid_char_callback=_record)) == "*"
    assert seen == ["#"]


def test_decode_never_raises_on_garbage():
    for code in ("", "/", "///", "abc", "  . - /  x ", "\u0000", "-.-.-.-.-.-.-.-.-"):
        assert isinstance(decode(code), str)


def test_priority_selects_owner_of_shared_patterns():
    cyrillic = Options(priority=(CharacterSet.CYRILLIC,))
    greek = Options(priority=(CharacterSet.GREEK, CharacterSet.CYRILLIC))
    assert decode(".- -...") == "AB"
    assert decode(".- -...", cyrillic) == "АБ"
    assert decode(".- -...", greek) == "ΑΒ"


def test_without_fallback_only_named_sets_are_searched():
    strict = Options(fallback=False)
    assert encode("A1", strict) == ".- 1"
    assert decode(".---- .-", strict) == "#A"
    assert encode("A1") == ".- .----"


def test_roundtrip_every_set_under_its_own_priority():
    registry = default_registry()
    for charset in CharacterSet:
        opts = Options(priority=(charset,))
        for entry in registry.entries(charset):
            if entry.char.upper() != entry.char:
                continue
            if registry.reverse_lookup(entry.pattern, (charset,)) != entry.char:
                continue
            assert decode(encode(entry.char, opts), opts) == entry.char, (charset, entry.char)


def test_multi_character_glyphs():
    opts = Options(dot="di", dash="dah", separator=" ", space=" | ")
    code = encode("SOS OK", opts)
    assert code == "dididi dahdahdah dididi  |  dahdahdah dahdidah"
    assert decode(code, opts) == "SOS OK"


def test_characters_renders_tables_with_glyphs():
    tables = characters(_bullet_options())
    assert tables[CharacterSet.LATIN]["A"] == "•–"
    assert tables[CharacterSet.NUMBERS]["0"] == "–––––"
    assert list(characters(Options(priority=(CharacterSet.GREEK,))))[0] is CharacterSet.GREEK
    assert list(characters(Options(priority=(CharacterSet.GREEK,)), use_priority=False))[0] is CharacterSet.LATIN
    assert list(characters(Options(fallback=False))) == [CharacterSet.LATIN]


def test_lowest_code_point_owns_pattern_shared_within_a_set():
    extended = Options(priority=(CharacterSet.LATIN_EXTENDED,))
    decoded = {code: decode(code, extended) for code in (".--.-", "..-..", "---.", "..--", "--..-")}
    assert decoded == {".--.-": "À", "..-..": "É", "---.": "Ò", "..--": "Ù", "--..-": "Ż"}

    cyrillic = Options(priority=(CharacterSet.CYRILLIC,))
    assert decode("..", cyrillic) == "І"
    assert decode("--.", cyrillic) == "Г"
    assert decode("..-..", cyrillic) == "Є"
    # encoding is unaffected: every letter keeps its own pattern
    assert encode("ИІ", cyrillic) == ".. .."


def test_delimiters_overlapping_mark_glyphs_are_rejected():
    for kwargs in (
        {"separator": ".."},
        {"space": "/-"},
        {"separator": "x", "dot": "ax"},
        {"space": "*", "dash": "**"},
    ):
        with pytest.raises(ValueError, match="overlaps"):
            Options(**kwargs)
    assert Options(dot="di", dash="dah", separator=" ", space=" | ").space == " | "
