from __future__ import annotations

import json

import pytest

from lisk_txkit import cli

from txdata import (
    NETWORK_IDENTIFIER,
    PASSPHRASE,
    SENDER_PUBLIC_KEY,
    TRANSFER_ASSET,
    TRANSFER_SIGNED_NONCE_1,
    TRANSFER_UNSIGNED_NONCE_1,
    StubNodeClient,
)

OFFLINE_CREATE = [
    "create",
    "2",
    "0",
    "100000000",
    "--offline",
    f"--network-identifier={NETWORK_IDENTIFIER}",
    "--nonce=1",
    f"--asset={TRANSFER_ASSET}",
]


def _run(capsys: pytest.CaptureFixture, argv: list[str]):
    cli.main(argv)
    return json.loads(capsys.readouterr().out)


def test_create_offline_prints_hex(capsys: pytest.CaptureFixture) -> None:
    output = _run(capsys, OFFLINE_CREATE + [f"--passphrase={PASSPHRASE}"])

    assert output == {"transaction": TRANSFER_SIGNED_NONCE_1}


def test_create_offline_unsigned_json(capsys: pytest.CaptureFixture) -> None:
    output = _run(
        capsys,
        OFFLINE_CREATE + ["--no-signature", f"--sender-public-key={SENDER_PUBLIC_KEY}", "--json"],
    )

    assert output["nonce"] == "1"
    assert output["fee"] == "100000000"
    assert output["senderPublicKey"] == SENDER_PUBLIC_KEY
    assert output["signatures"] == []


def test_create_output_is_compact(capsys: pytest.CaptureFixture) -> None:
    cli.main(OFFLINE_CREATE + [f"--passphrase={PASSPHRASE}"])

    assert capsys.readouterr().out == f'{{"transaction":"{TRANSFER_SIGNED_NONCE_1}"}}\n'


@pytest.mark.parametrize(
    "argv, message",
    [
        (["create", "2", "0", "1", "--offline", "--nonce=1"], "--network-identifier must be specified"),
        (OFFLINE_CREATE[:-2] + [f"--asset={TRANSFER_ASSET}"], "--nonce must be specified"),
        (OFFLINE_CREATE + ["--no-signature"], "Sender publickey must be specified"),
        (OFFLINE_CREATE + ["--data-path=/tmp/lisk"], "--data-path should not be specified"),
        (["create", "99999", "0", "1"] + OFFLINE_CREATE[4:], "moduleID:99999 with assetID:0"),
    ],
)
def test_create_errors_exit_with_status_one(
    capsys: pytest.CaptureFixture, argv: list[str], message: str
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error: ")
    assert message in captured.err


def test_sign_offline_adds_signature(capsys: pytest.CaptureFixture) -> None:
    output = _run(
        capsys,
        [
            "sign",
            TRANSFER_UNSIGNED_NONCE_1,
            "--offline",
            f"--network-identifier={NETWORK_IDENTIFIER}",
            f"--passphrase={PASSPHRASE}",
        ],
    )

    assert output == {"transaction": TRANSFER_SIGNED_NONCE_1}


def test_decode_offline_prints_fields(capsys: pytest.CaptureFixture) -> None:
    output = _run(capsys, ["decode", TRANSFER_SIGNED_NONCE_1, "--offline"])

    assert output["moduleID"] == 2
    assert output["asset"]["amount"] == "100"
    assert output["asset"]["data"] == "send token"
    assert len(output["signatures"]) == 1


def test_decode_online_uses_node_schemas(
    capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = StubNodeClient()

    class ClientFactory:
        @staticmethod
        def from_data_path(data_path):
            return client

    monkeypatch.setattr("lisk_txkit.cli.NodeRPCClient", ClientFactory)

    output = _run(capsys, ["decode", TRANSFER_SIGNED_NONCE_1])

    assert output["senderPublicKey"] == SENDER_PUBLIC_KEY
    assert client.methods() == ["app:getSchema"]


def test_decode_rejects_malformed_hex(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["decode", "zz", "--offline"])

    assert excinfo.value.code == 1
    assert "error: " in capsys.readouterr().err
