"""共享 fixture：mock shell（只校验参数）与指向 tmp_path 的真实 shell。"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

from common_cli.core.shell import CommonShell


@pytest.fixture
def mock_shell():
    shell = MagicMock()
    shell.run_configured = AsyncMock(return_value="")
    shell.run = AsyncMock(return_value="")
    shell.working_directory = "/work"
    # Gh / Pkgbuild 在构造时调用 configured()，让绑定后的 shell 共用同一个 run
    shell.configured.return_value = shell
    return shell


@pytest.fixture
def workdir(tmp_path):
    return os.path.realpath(tmp_path)


@pytest.fixture
def shell(workdir):
    # C locale 下 GNU ls 按字节序排序，与 native 实现一致
    return CommonShell(working_directory=workdir, environment={"LC_ALL": "C"})

