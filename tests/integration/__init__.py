"""集成测试包。

集成测试特点：
- 需要真实的 PostgreSQL / Redis（通过 Docker）
- 依赖不可用时自动 skip

运行方式：
    # 先启动依赖服务
    docker-compose up -d postgres redis

    # 运行集成测试
    uv run pytest tests/integration/ -v -m integration
"""
