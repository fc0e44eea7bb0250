import pytest
from pydantic import ValidationError

from remote_shell.core.exceptions import SSHConfigException
from remote_shell.infrastructures.ssh import CommandResult, SSHConnectionConfig, DISPATCH_FAILED_EXIT_STATUS


def test_config_strips_host_and_username():
    config = SSHConnectionConfig(host="  example.com ", username=" tester ", password="secret")

    assert config.host == "example.com"
    assert config.username == "tester"
    assert config.port == 22


def test_config_rejects_out_of_range_port():
    with pytest.raises(ValidationError):
        SSHConnectionConfig(host="example.com", port=0, username="tester", password="secret")


def test_empty_password_counts_as_password_auth():
    config = SSHConnectionConfig(host="example.com", username="tester", password="")

    config.validate_auth_method()
    assert not config.uses_key


def test_missing_auth_method():
    config = SSHConnectionConfig(host="example.com", username="tester")

    with pytest.raises(SSHConfigException) as exc_info:
        config.validate_auth_method()

    assert exc_info.value.http_status == 400


def test_repr_hides_secrets():
    config = SSHConnectionConfig(host="example.com", username="tester", password="hunter2")

    assert "hunter2" not in repr(config)
    assert repr(config) == "SSHConnectionConfig(tester@example.com:22, auth=password)"


def test_command_result_success_flag():
    assert CommandResult(stdout="", stderr="", exit_status=0, current_directory="/").success
    assert not CommandResult(stdout="", stderr="", exit_status=2, current_directory="/").success


def test_dispatch_failed_result():
    result = CommandResult.dispatch_failed("Channel closed.", "/tmp")

    assert result.exit_status == DISPATCH_FAILED_EXIT_STATUS
    assert result.stderr == "Command execution failed: Channel closed."
    assert result.current_directory == "/tmp"
    assert not result.success
