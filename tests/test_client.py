"""Tests for the VoxSigma entry point."""

import httpx
import pytest
import respx

from voxsigma import ApiKeyCredential, VoxSigma
from voxsigma.config.schema import CliConfig, VoxSigmaConfig
from voxsigma.errors import DispatchError
from voxsigma.methods import Align, Dtmf, Hello, Kws, Lid, Part, Status, Trans, Xml2Kar


@pytest.fixture
def cli_client(bin_dir, tmp_path) -> VoxSigma:
    return VoxSigma.cli(root=str(tmp_path), tmp=str(tmp_path))


@pytest.fixture
def rest_client() -> VoxSigma:
    return VoxSigma.rest("https://vox.example.com", ApiKeyCredential("secret"))


def test_builders_are_bound_to_driver(cli_client):
    builders = {
        cli_client.trans: Trans,
        cli_client.part: Part,
        cli_client.lid: Lid,
        cli_client.align: Align,
        cli_client.dtmf: Dtmf,
        cli_client.kws: Kws,
        cli_client.hello: Hello,
        cli_client.status: Status,
        cli_client.xml2kar: Xml2Kar,
    }
    for factory, method_cls in builders.items():
        method = factory()
        assert isinstance(method, method_cls)
        assert method._driver is cli_client.driver


def test_cli_client(cli_client, make_binary, audio_file):
    make_binary("vrxs_trans", 'printf "<Result>%s</Result>" "$*"')

    response = cli_client.trans().model("fre").file(str(audio_file)).run()

    assert response.xml == f"<Result>-lfre -f {audio_file}</Result>"
    assert cli_client.supports_pipeline()
    assert cli_client.config.driver == "cli"


def test_cli_pipeline(cli_client, make_binary):
    make_binary("vrxs_dtmf", "printf ok")

    assert cli_client.pipeline().dtmf().run().xml == "ok"


def test_rest_client_rejects_pipeline(rest_client):
    assert not rest_client.supports_pipeline()
    with pytest.raises(DispatchError):
        rest_client.pipeline()


@respx.mock
def test_rest_client(rest_client):
    respx.post("https://vox.example.com/voxsigma").mock(
        return_value=httpx.Response(200, text="<Hello/>")
    )

    assert rest_client.hello().run().success
    assert rest_client.config.rest.base_url == "https://vox.example.com"


def test_execute_request(cli_client, make_binary):
    make_binary("vrxs_lid", "printf lid")

    request = Lid().to_request()

    assert cli_client.execute(request).xml == "lid"
    assert cli_client.execute_async(request).wait(timeout=10).xml == "lid"


def test_from_env(monkeypatch, tmp_path, bin_dir):
    monkeypatch.delenv("VOXSIGMA_URL", raising=False)
    monkeypatch.setenv("VRXS_BIN", str(bin_dir))

    client = VoxSigma.from_env()

    assert client.driver.bin_path == bin_dir


def test_explicit_driver_wins(cli_driver):
    client = VoxSigma(VoxSigmaConfig(cli=CliConfig(root="/nonexistent")), driver=cli_driver)
    assert client.driver is cli_driver
