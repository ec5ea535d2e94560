import base64

import pytest

from mime_body import (
    BodyKind,
    DepthExceededError,
    MessageFramingError,
    MissingBoundaryError,
    QuotedPrintableDecodeError,
    convert_message,
    parse_media_type,
    parse_raw_message,
)

MULTIPART_AB = (
    b"From: sender@example.com\r\n"
    b"To: inbox@example.org\r\n"
    b"Subject: Two parts\r\n"
    b"MIME-Version: 1.0\r\n"
    b'Content-Type: multipart/alternative; boundary="XYZ"\r\n'
    b"\r\n"
    b"--XYZ\r\n"
    b"Content-Type: text/plain\r\n"
    b"\r\n"
    b"A\r\n"
    b"--XYZ\r\n"
    b"Content-Type: text/plain\r\n"
    b"\r\n"
    b"B\r\n"
    b"--XYZ--\r\n"
)


def _convert(raw, **kwargs):
    return convert_message(parse_raw_message(raw), **kwargs)


def test_plain_message_is_text():
    result = _convert(b"From: a@example.com\nSubject: Hi\n\nhello")
    assert result.subject == "Hi"
    assert result.body.kind is BodyKind.TEXT
    assert result.body.data == "hello"


def test_multipart_is_joined_as_html():
    result = _convert(MULTIPART_AB)
    assert result.subject == "Two parts"
    assert result.body.kind is BodyKind.HTML
    assert result.body.data == "AB"


def test_multipart_of_plain_text_is_still_html():
    raw = MULTIPART_AB.replace(b"multipart/alternative", b"multipart/mixed")
    assert _convert(raw).body.kind is BodyKind.HTML


def test_missing_subject_is_empty():
    assert _convert(b"From: a@example.com\n\nbody").subject == ""


def test_first_duplicate_header_wins():
    raw = b"Subject: first\nsubject: second\nFrom: a@example.com\n\nbody"
    assert _convert(raw).subject == "first"


def test_encoded_word_subject_is_left_raw():
    raw = b"Subject: =?utf-8?q?caf=C3=A9?=\n\nbody"
    assert _convert(raw).subject == "=?utf-8?q?caf=C3=A9?="


def test_top_level_transfer_encoding_is_decoded():
    body = base64.encodebytes("Grüße".encode("utf-8"))
    raw = (
        b"Subject: b64\n"
        b"Content-Type: text/plain; charset=utf-8\n"
        b"Content-Transfer-Encoding: base64\n\n" + body
    )
    result = _convert(raw)
    assert result.body.kind is BodyKind.TEXT
    assert result.body.data == "Grüße"


def test_unknown_transfer_encoding_is_identity():
    raw = b"Subject: x\nContent-Transfer-Encoding: x-garbled!!\n\n=ZZ raw"
    assert _convert(raw).body.data == "=ZZ raw"


def test_unparseable_content_type_falls_back_to_text():
    raw = b'Subject: x\nContent-Type: multipart/mixed boundary="XYZ"\n\n--XYZ\n\nA\n--XYZ--\n'
    result = _convert(raw)
    assert result.body.kind is BodyKind.TEXT
    assert result.body.data == "--XYZ\n\nA\n--XYZ--\n"


def test_top_level_multipart_without_boundary():
    raw = b"Subject: x\nContent-Type: multipart/mixed\n\n--XYZ\n\nA\n--XYZ--\n"
    with pytest.raises(MissingBoundaryError):
        _convert(raw)


def test_nested_multipart_without_boundary_returns_nothing():
    raw = (
        b"Subject: nested\n"
        b'Content-Type: multipart/mixed; boundary="outer"\n'
        b"\n"
        b"--outer\n"
        b"\n"
        b"A\n"
        b"--outer\n"
        b"Content-Type: multipart/mixed\n"
        b"\n"
        b"--inner\n\nB\n--inner--\n"
        b"--outer--\n"
    )
    with pytest.raises(MissingBoundaryError):
        _convert(raw)


def test_depth_limit_is_passed_to_walker():
    raw = (
        b'Content-Type: multipart/mixed; boundary="outer"\n'
        b"\n"
        b"--outer\n"
        b'Content-Type: multipart/alternative; boundary="inner"\n'
        b"\n"
        b"--inner\n\nB\n--inner--\n"
        b"--outer--\n"
    )
    assert _convert(raw).body.data == "B"
    with pytest.raises(DepthExceededError):
        _convert(raw, max_depth=1)


def test_decode_error_propagates():
    raw = b"Content-Transfer-Encoding: quoted-printable\n\nbroken =G1"
    with pytest.raises(QuotedPrintableDecodeError):
        _convert(raw)


def test_raw_message_framing():
    message = parse_raw_message(b"Subject: s\r\nX-Other: o\r\n\r\nline1\r\n\r\nline2")
    assert message.get("subject") == "s"
    assert message.get("x-other") == "o"
    assert message.body == b"line1\r\n\r\nline2"


def test_raw_message_without_body():
    message = parse_raw_message(b"Subject: only headers\n")
    assert message.get("Subject") == "only headers"
    assert message.body == b""


@pytest.mark.parametrize("raw", [b"", b"this is not a header\n\nbody", b" continuation first: x\n\nbody"])
def test_raw_message_rejects_bad_framing(raw):
    with pytest.raises(MessageFramingError):
        parse_raw_message(raw)


def test_parse_media_type():
    media = parse_media_type('Multipart/Mixed; Boundary="a b"; charset=utf-8')
    assert media.type == "multipart/mixed"
    assert media.is_multipart
    assert media.params == {"boundary": "a b", "charset": "utf-8"}
    assert parse_media_type("text/plain").params == {}
    assert parse_media_type("") is None
    assert parse_media_type(None) is None
    assert parse_media_type("text plain") is None


def test_folded_header_is_unfolded():
    message = parse_raw_message(b"To: a@example.com,\r\n b@example.com\r\nSubject: long\r\n\tsubject\r\n\r\nbody")
    assert message.get("To") == "a@example.com, b@example.com"
    assert convert_message(message).subject == "long\tsubject"


@pytest.mark.parametrize(
    "value",
    [
        "multipart/mixed; boundary=b; garbage",
        "multipart/mixed; boundary=b;; charset=utf-8",
        'multipart/mixed; boundary="unterminated',
        "multipart/mixed; boundary=a b",
    ],
)
def test_malformed_parameters_reject_media_type(value):
    assert parse_media_type(value) is None


def test_trailing_semicolon_is_allowed():
    media = parse_media_type('text/plain; charset="utf-8";')
    assert media.params == {"charset": "utf-8"}


def test_malformed_parameter_makes_message_text():
    raw = b"Subject: x\nContent-Type: multipart/mixed; boundary=XYZ; garbage\n\n--XYZ\n\nA\n--XYZ--\n"
    result = _convert(raw)
    assert result.body.kind is BodyKind.TEXT
    assert result.body.data == "--XYZ\n\nA\n--XYZ--\n"
