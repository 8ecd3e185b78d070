"""Gateway 启动入口 -- python -m fieldportal.gateway

监听地址与端口来自 HOST / PORT 环境变量（默认 0.0.0.0:3001）。
"""

import uvicorn

from .config import load_gateway_config


def main() -> None:
    config = load_gateway_config()
    uvicorn.run(
        "fieldportal.gateway.main:app",
        host=config.host,
        port=config.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
