import hashlib

import pytest
import yaml

from sha256_cli import main


def test_hashes_message_argument(capsys):
    assert main(["abc"]) == 0
    assert capsys.readouterr().out.strip() == hashlib.sha256(b"abc").hexdigest()


def test_empty_message(capsys):
    assert main([""]) == 0
    assert capsys.readouterr().out.strip() == hashlib.sha256(b"").hexdigest()


def test_double_flag(capsys):
    assert main(["--double", "hello"]) == 0
    assert capsys.readouterr().out.strip() == (
        "9595c9df90075148eb06860365df33584b75bff782a510c6cd4883a419833d50"
    )


def test_file_mode_streams_in_chunks(tmp_path, capsys):
    data = bytes(range(256)) * 10
    path = tmp_path / "blob.bin"
    path.write_bytes(data)

    assert main(["-f", str(path), "--chunk-size", "100"]) == 0
    assert capsys.readouterr().out.strip() == hashlib.sha256(data).hexdigest()

    assert main(["-f", str(path), "--double"]) == 0
    expected = hashlib.sha256(hashlib.sha256(data).digest()).hexdigest()
    assert capsys.readouterr().out.strip() == expected


def test_missing_file_reports_error(tmp_path, capsys):
    assert main(["-f", str(tmp_path / "missing.bin")]) == 1
    assert "Error reading file" in capsys.readouterr().err


def test_rejects_non_positive_chunk_size(capsys):
    assert main(["abc", "--chunk-size", "0"]) == 1
    assert "--chunk-size" in capsys.readouterr().err


def test_requires_an_input():
    with pytest.raises(SystemExit):
        main([])


def test_vectors_mode(tmp_path, capsys):
    path = tmp_path / "vectors.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "vectors": [
                    {"name": "ok", "message": "abc", "digest_hex": hashlib.sha256(b"abc").hexdigest()},
                    {"name": "bad", "message": "abc", "digest_hex": "11" * 32},
                ]
            }
        ),
        encoding="utf-8",
    )

    assert main(["--vectors", str(path)]) == 1
    out = capsys.readouterr().out
    assert "FAIL bad" in out
    assert "1/2 vectors passed" in out


def test_vectors_mode_missing_file(tmp_path, capsys):
    assert main(["--vectors", str(tmp_path / "nope.yaml")]) == 1
    assert "Error loading vectors" in capsys.readouterr().err


def test_double_with_vectors_is_rejected(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--vectors", "data/vectors.yaml", "--double"])

    assert excinfo.value.code == 2
    assert "--double" in capsys.readouterr().err
