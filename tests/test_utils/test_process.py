"""Tests for running external commands."""

import pytest
import subprocess
import sys

from weestack.utils.process import failure_detail, run_command


@pytest.mark.asyncio
class TestRunCommand:
    """Test run_command against a real child process."""

    async def test_captures_output(self):
        result = await run_command([sys.executable, "-c", "print('hello')"])

        assert result.returncode == 0
        assert result.stdout == "hello\n"
        assert result.stderr == ""

    async def test_failure_carries_stderr(self):
        script = "import sys; sys.stderr.write('disk full\\n'); sys.exit(3)"

        with pytest.raises(subprocess.CalledProcessError) as exc_info:
            await run_command([sys.executable, "-c", script])

        assert exc_info.value.returncode == 3
        assert exc_info.value.stderr == "disk full\n"

    async def test_unchecked_failure(self):
        result = await run_command([sys.executable, "-c", "raise SystemExit(2)"], check=False)

        assert result.returncode == 2

    async def test_missing_program(self):
        with pytest.raises(FileNotFoundError):
            await run_command(["/nonexistent/qemu-img", "create"])


class TestFailureDetail:
    """Test failure detail extraction."""

    def test_stderr(self):
        error = subprocess.CalledProcessError(1, ["virsh"], stderr="  error: no domain\n")

        assert failure_detail(error) == "error: no domain"

    def test_no_stderr(self):
        error = subprocess.CalledProcessError(4, ["virt-install", "--name", "vm"])

        assert failure_detail(error) == "virt-install exited with status 4"
