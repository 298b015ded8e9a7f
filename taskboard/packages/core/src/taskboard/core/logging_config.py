"""structlog 配置 -- 供 CLI 入口调用

库代码只通过 structlog.get_logger() 记录事件，不自行配置输出；
由宿主进程（CLI 或调用方应用）决定格式与级别。
"""

import logging
import os
import sys

import structlog

_RENDERERS = {
    "json": lambda: structlog.processors.JSONRenderer(ensure_ascii=False),
    "dev": structlog.dev.ConsoleRenderer,
}


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """把 structlog 事件路由到 stderr 上的标准 logging handler

    参数缺省时读取 TASKBOARD_LOG_FORMAT（json / dev，默认 dev）
    与 TASKBOARD_LOG_LEVEL（默认 INFO）。未知格式按 dev 处理。
    """
    log_format = log_format or os.environ.get("TASKBOARD_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("TASKBOARD_LOG_LEVEL", "INFO")
    renderer = _RENDERERS.get(log_format, _RENDERERS["dev"])()

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))
