import pytest

from shrink import engine
from shrink.flate import deflate

TEXT = b"hello world\nhello there, <world> and \\ again hello world\n"


def _outcome(call):
    try:
        return ("ok", call())
    except ValueError as exc:
        return ("error", str(exc))


@pytest.mark.parametrize("algorithm", ["huffman", "lzss"])
def test_round_trip_bytes(algorithm):
    packed = engine.compress_bytes(algorithm, TEXT)
    assert engine.decompress_bytes(algorithm, packed) == TEXT


def test_lzss_shrinks_repetitive_text():
    data = b"abcdefghij" * 20
    packed = engine.compress_bytes("lzss", data)
    assert len(packed) < len(data)
    assert engine.decompress_bytes("lzss", packed) == data


def test_flate_matches_deflate_module():
    data = b"abcabcabcabc"
    options = {"btype": 2, "bfinal": 1}
    assert _outcome(lambda: engine.compress_bytes("flate", data, options)) == _outcome(
        lambda: deflate.compress(data, 2, 1)
    )


def test_flate_without_options_raises():
    with pytest.raises(engine.EngineError) as excinfo:
        engine.compress_bytes("flate", b"abc")
    assert "arguments missing for flate" in str(excinfo.value)


def test_flate_with_partial_options_raises():
    with pytest.raises(engine.EngineError):
        engine.compress_bytes("flate", b"abc", {"btype": 2})


def test_unknown_compression_engine():
    with pytest.raises(engine.EngineError, match="compression engine does not exist"):
        engine.compress_bytes("zip", b"abc")


def test_unknown_decompression_engine():
    with pytest.raises(engine.EngineError, match="decompression engine does not exist"):
        engine.decompress_bytes("zip", b"abc")


def test_flate_has_no_decompression():
    with pytest.raises(engine.EngineError):
        engine.decompress_bytes("flate", b"abc")


def test_decompressed_name():
    assert engine.decompressed_name("a.txt.shk") == "a-decompressed.txt"


def test_decompressed_name_keeps_text_before_first_dot():
    assert engine.decompressed_name("report.shk").startswith("report")
    assert engine.decompressed_name("report.shk").endswith("-decompressed.txt")


def test_compress_file_writes_output(tmp_path, capsys):
    source = tmp_path / "in.txt"
    source.write_bytes(TEXT)
    target = tmp_path / "out.bin"
    content = engine.compress_file("huffman", source, target, None)
    assert target.read_bytes() == content
    assert engine.decompress_bytes("huffman", content) == TEXT
    out = capsys.readouterr().out
    assert "Compression ratio:" in out
    assert f"Original size (in bytes): {len(TEXT)}" in out


def test_compress_and_decompress_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "one.txt").write_bytes(TEXT)
    (tmp_path / "two.txt").write_bytes(b"second file, second file, second")
    outputs = engine.compress_files("lzss", ["one.txt", "two.txt"], ".shk", None)
    assert outputs == ["one.txt.shk", "two.txt.shk"]
    written = engine.decompress_files("lzss", outputs)
    assert written == [engine.decompressed_name(o) for o in outputs]
    assert (tmp_path / written[0]).read_bytes() == TEXT
    assert (tmp_path / written[1]).read_bytes() == b"second file, second file, second"


def test_compress_file_missing_input(tmp_path):
    with pytest.raises(FileNotFoundError):
        engine.compress_file("huffman", tmp_path / "absent.txt", tmp_path / "x", None)