from __future__ import annotations

from vcard_parser.unfold import WRAP, normalize_newlines, restore_wraps, strip_wraps, unfold


def test_crlf_and_blank_lines_collapse():
    assert normalize_newlines("A:1\r\n\r\nB:2\rC:3\n\n\n") == "A:1\nB:2\nC:3\n"


def test_soft_wrap_keeps_fold_point():
    text = unfold("NOTE:Hello\n World\nFN:X\n")
    assert text == f"NOTE:Hello{WRAP}World\nFN:X\n"
    assert strip_wraps("Hello" + WRAP + "World") == "HelloWorld"
    assert restore_wraps("a" + WRAP + "b") == "a\nb"


def test_tab_continuation():
    assert unfold("NOTE:one\n\ttwo\n") == f"NOTE:one{WRAP}two\n"


def test_quoted_printable_hard_wrap_joined():
    text = unfold("NOTE;ENCODING=QUOTED-PRINTABLE:caf=C3=A9 =\nau lait\nFN:X\n")
    assert text == "NOTE;ENCODING=QUOTED-PRINTABLE:caf=C3=A9 au lait\nFN:X\n"


def test_base64_padding_on_continuation_line_survives():
    text = unfold("PHOTO;ENCODING=b:aGVs\n bG8=\nEND:VCARD\n")
    assert text == f"PHOTO;ENCODING=b:aGVs{WRAP}bG8=\nEND:VCARD\n"


def test_base64_padding_on_first_line_survives():
    text = unfold("PHOTO;ENCODING=b;TYPE=JPEG:aGVsbG8=\nEND:VCARD\n")
    assert text == "PHOTO;ENCODING=b;TYPE=JPEG:aGVsbG8=\nEND:VCARD\n"


def test_garbage_passes_through():
    assert unfold("") == ""
    assert unfold("no colons here") == "no colons here"


def test_text_resembling_markers_kept_verbatim():
    assert unfold("NOTE:use pre-wrap-text css\n") == "NOTE:use pre-wrap-text css\n"
    assert unfold("NOTE:x-base64=-y\n") == "NOTE:x-base64=-y\n"
