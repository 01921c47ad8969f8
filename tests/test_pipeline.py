"""Tests for pipelined execution."""

import pytest

from voxsigma.errors import DispatchError
from voxsigma.methods import Dtmf, Lid, Part, Trans
from voxsigma.pipeline import Pipeline, PipelineStage


def test_stage_builders(cli_driver):
    pipeline = (
        Pipeline(cli_driver)
        .dtmf()
        .part()
        .max_speakers(2)
        .done()
        .lid()
        .done()
        .trans()
        .model("fre")
        .done()
    )

    stages = pipeline.stages
    assert [type(stage) for stage in stages] == [Dtmf, Part, Lid, Trans]
    assert stages[1].parameter_values == {"max_speakers": 2}
    assert stages[3].parameter_values == {"model": "fre"}


def test_stage_proxy_returns_itself():
    stage = Pipeline().trans()

    assert isinstance(stage, PipelineStage)
    assert stage.model("eng") is stage


def test_stage_proxy_unknown_method():
    with pytest.raises(AttributeError):
        Pipeline().part().not_a_setter()


def test_only_first_stage_gets_input(cli_driver, audio_file):
    pipeline = Pipeline(cli_driver).input(str(audio_file)).part().done().trans().done()

    first, second = pipeline.to_requests()

    assert first.audio_file == str(audio_file)
    assert second.audio_file is None


def test_to_cli(cli_driver, bin_dir, audio_file):
    command = (
        Pipeline(cli_driver)
        .input(str(audio_file))
        .part()
        .max_speakers(2)
        .done()
        .trans()
        .model("fre")
        .done()
        .to_cli()
    )

    assert command == f"{bin_dir}/vrxs_part -k2 -f {audio_file} | {bin_dir}/vrxs_trans -lfre -"


def test_run(cli_driver, make_binary, audio_file):
    make_binary("vrxs_dtmf", 'printf "<Dtmf>%s</Dtmf>\\n" "$*"')
    make_binary("vrxs_trans", "while IFS= read -r line; do printf '%s|%s\\n' \"$line\" \"$*\"; done")

    response = Pipeline(cli_driver).input(str(audio_file)).dtmf().trans().model("eng").done().run()

    assert response.success
    assert response.xml == f"<Dtmf>-f {audio_file}</Dtmf>|-leng -\n"


def test_run_with_explicit_driver(cli_driver, make_binary):
    make_binary("vrxs_dtmf", "printf ok")

    assert Pipeline().dtmf().run(cli_driver).xml == "ok"


def test_run_without_driver():
    with pytest.raises(DispatchError, match="No driver"):
        Pipeline().dtmf().run()


def test_run_without_stages(cli_driver):
    with pytest.raises(DispatchError, match="at least one stage"):
        Pipeline(cli_driver).run()


def test_rest_driver_rejected(rest_driver):
    with pytest.raises(DispatchError, match="CLI driver"):
        Pipeline(rest_driver).dtmf().run()
    with pytest.raises(DispatchError, match="CLI driver"):
        Pipeline(rest_driver).dtmf().to_cli()
