"""CLI 入口模块 -- python -m fieldportal.core <command>

支持的命令：
  list-messages [--booking <booking_id>]  打印消息日志（按时间倒序）
"""

import asyncio
import sys

from .config import get_messages_path


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m fieldportal.core <command>")
        print("命令:")
        print("  list-messages [--booking <booking_id>]  打印消息日志")
        sys.exit(1)

    command = sys.argv[1]

    if command == "list-messages":
        booking_id = None
        args = sys.argv[2:]
        if args:
            if len(args) != 2 or args[0] != "--booking":
                print("用法: python -m fieldportal.core list-messages [--booking <booking_id>]")
                sys.exit(1)
            booking_id = args[1]
        asyncio.run(list_messages(booking_id))
    else:
        print(f"未知命令: {command}")
        print("可用命令: list-messages")
        sys.exit(1)


async def list_messages(booking_id: str | None = None) -> int:
    """打印消息日志，返回打印的条数"""
    from .store import JsonMessageStore

    messages_path = get_messages_path()
    print(f"消息文件: {messages_path}")

    store = JsonMessageStore(messages_path)
    if booking_id:
        messages = await store.list_for_booking(booking_id)
    else:
        messages = await store.list_all()

    for m in messages:
        print(
            f"{m.created_at.isoformat()}  [{m.booking_id}]  "
            f"{m.customer_name} <{m.customer_email}>: {m.content}"
        )
    print(f"共 {len(messages)} 条消息")
    return len(messages)


if __name__ == "__main__":
    main()
