from llama_runner.infrastructure.tokenization import AsciiTokenizer


def test_encode_ascii(tokenizer):
    assert tokenizer.encode("Hi") == [72, 105]
    assert tokenizer.encode("") == []


def test_encode_non_ascii_maps_to_zero(tokenizer):
    assert tokenizer.encode("aéb") == [97, 0, 98]


def test_decode_ascii(tokenizer):
    assert tokenizer.decode([72, 105]) == "Hi"


def test_decode_code_points_beyond_ascii(tokenizer):
    assert tokenizer.decode([0x1F600]) == "\U0001F600"
    assert tokenizer.decode([128000]) == chr(128000)


def test_decode_invalid_scalar_values(tokenizer):
    assert tokenizer.decode([0xD800]) == " "
    assert tokenizer.decode([0x110000]) == " "
    assert tokenizer.decode([-1]) == " "


def test_tokenizer_is_stateless():
    first, second = AsciiTokenizer(), AsciiTokenizer()

    assert first.decode(first.encode("Hello")) == second.decode(second.encode("Hello")) == "Hello"
