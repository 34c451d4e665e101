"""Shell 命令执行工具 — 统一子进程调用

通过 ProcessRunner 协议抽象子进程执行，方便测试替换和跨平台适配。

两种执行方式:
  - 继承标准流: 子进程直接写终端，调用方阻塞等待退出
  - 重定向输出: stdout / stderr 各由一个 OutputPump 线程逐行转发，
    进程退出后有限时间内 join，仍未结束的 pump 被通知停止并放弃
"""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import IO, Callable, Protocol

logger = logging.getLogger(__name__)

LineSink = Callable[[str], None]

# 进程退出后等待输出线程收尾的最长时间（秒）
PUMP_JOIN_TIMEOUT = 5.0


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    duration: float = 0.0
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out


# =========================================================================
# 输出泵
# =========================================================================

class OutputPump:
    """逐行读取子进程输出流并转发到 sink 的后台线程

    可独立 join，可通知停止；线程为 daemon，放弃后不会阻塞解释器退出。
    """

    def __init__(self, stream: IO[str], sink: LineSink, name: str) -> None:
        self._stream = stream
        self._sink = sink
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._drain, name=name, daemon=True)
        self.lines = 0

    @property
    def name(self) -> str:
        return self._thread.name

    def start(self) -> OutputPump:
        self._thread.start()
        return self

    def _drain(self) -> None:
        try:
            for line in iter(self._stream.readline, ""):
                if self._stop.is_set():
                    break
                self.lines += 1
                self._sink(line.rstrip("\r\n"))
        except (OSError, ValueError) as e:
            # 流已被关闭
            logger.debug("输出读取中断 (%s): %s", self.name, e)

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = None) -> bool:
        """等待线程结束，返回是否已结束"""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_alive(self) -> bool:
        return self._thread.is_alive()


# =========================================================================
# 执行器协议
# =========================================================================

class ProcessRunner(Protocol):
    """子进程执行器协议

    测试时可注入 fake 实现，无需 patch subprocess。
    """

    def run(
        self,
        cmd: list[str],
        *,
        redirect: bool,
        timeout: float | None = None,
    ) -> CommandResult:
        """执行命令并阻塞到退出"""
        ...


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalRunner:
    """本地子进程执行器（默认实现）"""

    def __init__(
        self,
        stdout_sink: LineSink | None = None,
        stderr_sink: LineSink | None = None,
        pump_join_timeout: float = PUMP_JOIN_TIMEOUT,
    ) -> None:
        self._stdout_sink = stdout_sink or logger.info
        self._stderr_sink = stderr_sink or logger.warning
        self._pump_join_timeout = pump_join_timeout

    def run(
        self,
        cmd: list[str],
        *,
        redirect: bool,
        timeout: float | None = None,
    ) -> CommandResult:
        start = time.monotonic()
        if not redirect:
            with subprocess.Popen(cmd) as proc:
                returncode, timed_out = _wait(proc, timeout)
            return CommandResult(
                returncode=returncode,
                duration=time.monotonic() - start,
                timed_out=timed_out,
            )

        with subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE, stderr=subprocess.PIPE,
            text=True, errors="replace",
        ) as proc:
            assert proc.stdout is not None and proc.stderr is not None
            pumps = [
                OutputPump(proc.stderr, self._stderr_sink, "stderr").start(),
                OutputPump(proc.stdout, self._stdout_sink, "stdout").start(),
            ]
            try:
                returncode, timed_out = _wait(proc, timeout)
            finally:
                self._teardown(pumps)

        return CommandResult(
            returncode=returncode,
            duration=time.monotonic() - start,
            timed_out=timed_out,
        )

    def _teardown(self, pumps: list[OutputPump]) -> None:
        for pump in pumps:
            if not pump.join(self._pump_join_timeout):
                pump.stop()
                logger.warning("输出线程未在 %.1fs 内结束，已放弃: %s",
                               self._pump_join_timeout, pump.name)


def _wait(proc: subprocess.Popen, timeout: float | None) -> tuple[int, bool]:
    """等待进程退出；超时则 kill 并返回 (returncode, True)"""
    try:
        return proc.wait(timeout=timeout), False
    except subprocess.TimeoutExpired:
        logger.error("命令超时 (%ss)，终止进程: pid=%s", timeout, proc.pid)
        proc.kill()
        return proc.wait(), True
