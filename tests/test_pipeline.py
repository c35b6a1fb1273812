"""
End-to-end cycle: MANIFEST on disk -> encoded call -> submitted transaction.
"""
import pytest

from checkpointer.config import Settings
from checkpointer.core.pipeline import CheckpointPipeline
from checkpointer.core.service import build_pipeline, run, run_once
from checkpointer.core.submitter import TransactionSubmitter
from checkpointer.protocol.types.common import ConfigurationError, FormatError, EncodingError
from checkpointer.snapshot.manifest import ManifestReader
from conftest import CONTRACT, CHAIN_NAME, STATE_HASH, encode_manifest, write_manifest


def make_pipeline(parity_dir, signer, chain, chain_id=None):
    reader = ManifestReader(parity_dir, CHAIN_NAME)
    submitter = TransactionSubmitter(signer, chain, CONTRACT, gas_price=1, gas_limit=100_000)
    return CheckpointPipeline(reader, submitter, chain_id=chain_id)


def test_end_to_end_payload(parity_dir, fake_signer, fake_chain):
    receipt = make_pipeline(parity_dir, fake_signer, fake_chain).run_cycle()

    assert receipt.block_number == 100
    assert receipt.state_hash == STATE_HASH
    assert receipt.chain_id == 0
    assert receipt.tx_hash == "0x" + "ee" * 32

    envelope = fake_signer.sign_transaction.call_args[0][0]
    data = "0x" + envelope.data.hex()
    assert data == "0x73bf9915" + "0" * 62 + "64" + STATE_HASH + "0" * 64


def test_chain_id_flows_into_payload(parity_dir, fake_signer, fake_chain):
    receipt = make_pipeline(parity_dir, fake_signer, fake_chain, chain_id=9).run_cycle()

    assert receipt.chain_id == 9
    envelope = fake_signer.sign_transaction.call_args[0][0]
    assert envelope.data[-32:] == (9).to_bytes(32, "big")


def test_bad_manifest_never_reaches_submitter(tmp_path, fake_signer, fake_chain):
    write_manifest(tmp_path, encode_manifest(version=b"\x01"))

    with pytest.raises(FormatError):
        make_pipeline(tmp_path, fake_signer, fake_chain).run_cycle()

    fake_chain.get_nonce.assert_not_called()
    fake_signer.sign_transaction.assert_not_called()


def test_negative_chain_id_is_encoding_error(parity_dir, fake_signer, fake_chain):
    with pytest.raises(EncodingError):
        make_pipeline(parity_dir, fake_signer, fake_chain, chain_id=-1).run_cycle()
    fake_chain.get_nonce.assert_not_called()


# ═══════════════════════════════════════════════════════════════════
# SERVICE WIRING
# ═══════════════════════════════════════════════════════════════════

def settings_for(parity_dir, **extra):
    data = {"PARITY_DIR": str(parity_dir), "CHAIN_NAME": CHAIN_NAME, "CONTRACT": CONTRACT}
    data.update(extra)
    return Settings.from_mapping(data)


@pytest.mark.parametrize("missing", ["PARITY_DIR", "CHAIN_NAME"])
def test_build_pipeline_requires_snapshot_location(parity_dir, fake_signer, fake_chain, missing):
    data = {"PARITY_DIR": str(parity_dir), "CHAIN_NAME": CHAIN_NAME, "CONTRACT": CONTRACT}
    del data[missing]

    with pytest.raises(ConfigurationError):
        build_pipeline(Settings.from_mapping(data), signer=fake_signer, anchor_client=fake_chain)


def test_build_pipeline_requires_contract(parity_dir, fake_signer, fake_chain):
    settings = Settings.from_mapping({"PARITY_DIR": str(parity_dir), "CHAIN_NAME": CHAIN_NAME})
    with pytest.raises(ConfigurationError):
        build_pipeline(settings, signer=fake_signer, anchor_client=fake_chain)


def test_build_pipeline_rejects_non_integer_chain_id(parity_dir, fake_signer, fake_chain):
    with pytest.raises(ConfigurationError):
        build_pipeline(settings_for(parity_dir), chain_id="1", signer=fake_signer, anchor_client=fake_chain)


def test_build_pipeline_uses_settings(parity_dir, fake_signer, fake_chain):
    pipeline = build_pipeline(
        settings_for(parity_dir, GAS_PRICE="0x3b9aca00", GAS_LIMIT=80000),
        chain_id=3, signer=fake_signer, anchor_client=fake_chain,
    )
    receipt = pipeline.run_cycle()

    envelope = fake_signer.sign_transaction.call_args[0][0]
    assert envelope.gas_price == 1_000_000_000
    assert envelope.gas_limit == 80000
    assert receipt.chain_id == 3


def test_build_pipeline_loads_private_key(parity_dir, fake_chain):
    settings = settings_for(parity_dir, PRIVATE_KEY="0x" + "11" * 32)
    pipeline = build_pipeline(settings, anchor_client=fake_chain)
    assert pipeline.submitter.signer.get_address().startswith("0x")


def test_build_pipeline_missing_keystore_key(parity_dir, tmp_path, fake_chain):
    settings = settings_for(parity_dir, KEYSTORE_DIR=str(tmp_path / "keys"), KEY_NAME="nope")
    with pytest.raises(ConfigurationError):
        build_pipeline(settings, anchor_client=fake_chain)


def test_run_refuses_to_start_without_configuration():
    # Fails before any event loop or timer is created
    with pytest.raises(ConfigurationError):
        run(1, settings=Settings())


def test_run_once_reports_format_error(tmp_path):
    write_manifest(tmp_path, encode_manifest(version=b"\x03"))
    settings = settings_for(tmp_path, PRIVATE_KEY="11" * 32, PUBLIC_HOST="http://127.0.0.1:1")
    with pytest.raises(FormatError):
        run_once(settings=settings)
