"""Tests for the CLI driver and its async handle."""

import tempfile
import time

import pytest

from voxsigma.driver.cli import CliDriver
from voxsigma.driver.request import Request
from voxsigma.driver.response import CANCELED_MESSAGE
from voxsigma.errors import ConfigurationError, DispatchError, WaitTimeoutError
from voxsigma.methods import Lid, Part, Trans

ECHO_ARGS = 'printf "<Result>%s</Result>" "$*"'
ECHO_STDIN = "while IFS= read -r line; do printf '%s\\n' \"$line\"; done"


def test_missing_bin_dir(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        CliDriver(tmp_path / "nowhere")


def test_supports_pipeline(cli_driver):
    assert cli_driver.supports_pipeline()


def test_execute_success(cli_driver, make_binary, audio_file):
    make_binary("vrxs_trans", ECHO_ARGS)

    response = Trans(cli_driver).model("fre").file(str(audio_file)).run()

    assert response.success
    assert response.exit_code == 0
    assert response.xml == f"<Result>-lfre -f {audio_file}</Result>"


def test_execute_failure_reports_stderr(cli_driver, make_binary):
    make_binary("vrxs_trans", 'printf "<Partial/>"\necho "bad model" >&2\nexit 3')

    response = Trans(cli_driver).model("xxx").run()

    assert not response.success
    assert response.error == "bad model"
    assert response.error_code == 3
    assert response.exit_code == 3
    assert response.xml == "<Partial/>"


def test_execute_failure_without_stderr(cli_driver, make_binary):
    make_binary("vrxs_trans", "exit 4")

    response = Trans(cli_driver).run()

    assert response.error == "Process failed with exit code 4"
    assert response.error_code == 4


def test_audio_content_is_piped(cli_driver, make_binary):
    make_binary("vrxs_trans", ECHO_STDIN)

    response = Trans(cli_driver).audio_content(b"hello\nworld\n").run()

    assert response.success
    assert response.xml == "hello\nworld\n"


def test_request_stdin(cli_driver, make_binary):
    make_binary("vrxs_trans", ECHO_STDIN)

    response = cli_driver.execute(Request("vrxs_trans", stdin="abc\n"))

    assert response.xml == "abc\n"


def test_missing_binary(cli_driver):
    with pytest.raises(DispatchError, match="not found"):
        Trans(cli_driver).run()


def test_binary_not_executable(cli_driver, bin_dir):
    (bin_dir / "vrxs_trans").write_text("#!/bin/sh\n")

    with pytest.raises(DispatchError, match="not executable"):
        Trans(cli_driver).run()


def test_child_environment(cli_driver, make_binary, monkeypatch, tmp_path):
    """Test children only see VRXS_* variables, with VRXS_TMP forced."""
    monkeypatch.setenv("VRXS_MODELS", "/models")
    monkeypatch.setenv("VRXS_TMP", "/ignored")
    monkeypatch.setenv("VOXSIGMA_SECRET", "hidden")
    make_binary("vrxs_trans", 'printf "%s|%s|%s" "$VRXS_TMP" "$VRXS_MODELS" "$VOXSIGMA_SECRET"')

    response = Trans(cli_driver).run()

    assert response.xml == f"{tmp_path}|/models|"


def test_environment_tmp_default(bin_dir, monkeypatch):
    monkeypatch.setenv("VRXS_TMP", "/scratch")
    assert CliDriver(bin_dir).environment()["VRXS_TMP"] == "/scratch"

    monkeypatch.delenv("VRXS_TMP")
    assert CliDriver(bin_dir).environment()["VRXS_TMP"] == tempfile.gettempdir()


def test_list_files_removed_after_execute(cli_driver, make_binary, tmp_path):
    # -t <tmp> -m <list>: the list path is the fourth argument
    make_binary("vrxs_lid", "while IFS= read -r line; do printf '%s\\n' \"$line\"; done < \"$4\"")

    response = Lid(cli_driver).language_list(["fre", "eng"]).tmp_dir(str(tmp_path)).run()

    assert response.xml == "fre\neng\n"
    assert list(tmp_path.glob("voxsigma_ll_*")) == []


def test_async_wait(cli_driver, make_binary):
    make_binary("vrxs_trans", ECHO_ARGS)

    handle = Trans(cli_driver).model("eng").run_async()
    response = handle.wait(timeout=10)

    assert response.success
    assert response.xml == "<Result>-leng</Result>"
    assert handle.id.isdigit()
    assert handle.is_finished()
    assert not handle.is_running()
    assert handle.wait() is response


def test_async_failure(cli_driver, make_binary):
    make_binary("vrxs_trans", 'echo "no license" >&2\nexit 7')

    response = Trans(cli_driver).run_async().wait(timeout=10)

    assert not response.success
    assert response.error == "no license"
    assert response.error_code == 7


def test_async_large_output(cli_driver, make_binary):
    """Test output larger than a pipe buffer does not block the child."""
    make_binary(
        "vrxs_trans",
        'i=0\nwhile [ "$i" -lt 20000 ]; do echo "line $i"; i=$((i+1)); done',
    )

    response = Trans(cli_driver).run_async().wait(timeout=30)

    assert response.success
    assert len(response.xml.splitlines()) == 20000


def test_async_audio_content(cli_driver, make_binary):
    make_binary("vrxs_trans", ECHO_STDIN)

    response = Trans(cli_driver).audio_content(b"pcm\n").run_async().wait(timeout=10)

    assert response.xml == "pcm\n"


def test_async_timeout_then_cancel(cli_driver, make_binary):
    make_binary("vrxs_trans", "sleep 30")

    handle = Trans(cli_driver).run_async()
    with pytest.raises(WaitTimeoutError):
        handle.wait(timeout=0.2)
    assert handle.is_running()

    handle.cancel()
    response = handle.wait()

    assert not response.success
    assert response.canceled
    assert response.error == CANCELED_MESSAGE
    assert handle.is_finished()

    handle.cancel()
    assert handle.wait() is response


def test_is_running_does_not_block_on_held_pipes(cli_driver, make_binary):
    """Test a background grandchild holding the pipes does not stall polling."""
    make_binary("vrxs_trans", "sleep 30 &\nprintf started")

    handle = Trans(cli_driver).run_async()
    time.sleep(0.3)

    started = time.monotonic()
    assert handle.is_running()
    assert time.monotonic() - started < 1

    handle.cancel()
    response = handle.wait()

    assert response.canceled
    assert response.xml == "started"


def test_wait_timeout_is_a_timeout_error(cli_driver, make_binary):
    make_binary("vrxs_trans", "sleep 30")

    handle = Trans(cli_driver).run_async()
    try:
        with pytest.raises(TimeoutError):
            handle.wait(timeout=0.1)
    finally:
        handle.cancel()


def test_cancel_after_finish_is_noop(cli_driver, make_binary):
    make_binary("vrxs_trans", ECHO_ARGS)

    handle = Trans(cli_driver).run_async()
    response = handle.wait(timeout=10)
    handle.cancel()

    assert handle.wait() is response
    assert response.success


def test_async_list_files_removed_after_wait(cli_driver, make_binary, tmp_path):
    make_binary("vrxs_lid", ECHO_ARGS)

    handle = Lid(cli_driver).language_list(["fre"]).tmp_dir(str(tmp_path)).run_async()
    handle.wait(timeout=10)

    assert list(tmp_path.glob("voxsigma_ll_*")) == []


def test_async_missing_binary(cli_driver, tmp_path):
    with pytest.raises(DispatchError):
        Lid(cli_driver).language_list(["fre"]).tmp_dir(str(tmp_path)).run_async()
    assert list(tmp_path.glob("voxsigma_ll_*")) == []


def test_pipeline_command(cli_driver, bin_dir, audio_file):
    requests = [
        Part().max_speakers(2).to_request().with_audio_file(str(audio_file)),
        Trans().model("fre").to_request(),
    ]

    assert cli_driver.to_cli_pipeline(requests) == (
        f"{bin_dir}/vrxs_part -k2 -f {audio_file} | {bin_dir}/vrxs_trans -lfre -"
    )


def test_execute_pipeline(cli_driver, make_binary, audio_file):
    make_binary("vrxs_part", "printf '<Part/>\\n'")
    make_binary("vrxs_trans", "while IFS= read -r line; do printf 'trans:%s\\n' \"$line\"; done")

    response = cli_driver.execute_pipeline(
        [
            Part().to_request().with_audio_file(str(audio_file)),
            Trans().to_request(),
        ]
    )

    assert response.success
    assert response.xml == "trans:<Part/>\n"


def test_pipeline_failure_message(cli_driver, make_binary):
    make_binary("vrxs_part", "printf '<Part/>\\n'")
    make_binary("vrxs_trans", "exit 2")

    response = cli_driver.execute_pipeline([Part().to_request(), Trans().to_request()])

    assert not response.success
    assert response.error == "Pipeline failed with exit code 2"


def test_empty_pipeline(cli_driver):
    with pytest.raises(DispatchError, match="at least one"):
        cli_driver.execute_pipeline([])


def test_pipeline_missing_binary(cli_driver, make_binary):
    make_binary("vrxs_part", "exit 0")

    with pytest.raises(DispatchError, match="vrxs_trans"):
        cli_driver.execute_pipeline([Part().to_request(), Trans().to_request()])
