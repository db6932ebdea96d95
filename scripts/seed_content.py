"""
写入默认活动内容 (可重复执行)

用法:
    python scripts/seed_content.py            # 写入 event_site/data/default_content.json
    python scripts/seed_content.py --migrate  # 仅检查并迁移旧版结构
"""
import argparse
import os
import sys

# 将项目根目录加入路径，防止找不到 event_site 模块
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from event_site.core.config import load_settings
from event_site.db import close_databases, init_databases
from event_site.services.content_service import ContentRepository, load_default_content


def seed(migrate_only: bool = False) -> int:
    settings = load_settings()
    store = init_databases(settings)
    if store is None:
        print("❌ 需要配置 KV_REST_API_URL 或 REDIS_URL")
        return 1

    try:
        repo = ContentRepository(store)
        if migrate_only:
            if repo.migrate():
                print("✅ 旧版内容已迁移为当前结构")
            else:
                print("ℹ️ 无需迁移")
            return 0

        content = load_default_content()
        repo.write(content)
        print(f"✅ 默认内容已写入: {content.hero.title}")
        return 0
    finally:
        close_databases(store)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="写入默认活动内容")
    parser.add_argument("--migrate", action="store_true", help="只检查并迁移旧版结构")
    args = parser.parse_args()
    sys.exit(seed(migrate_only=args.migrate))
