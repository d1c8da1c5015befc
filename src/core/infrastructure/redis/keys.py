"""Redis Key 命名规范。

Redis 只用于功能开关等动态配置：
    config:{key}
    config:feature_flag:{flag_key}
"""


class RedisKeys:
    """Redis Key 命名空间管理。"""

    # 动态配置
    # config:{key}
    CONFIG_PREFIX = "config"

    # 功能开关（动态配置的子命名空间）
    FEATURE_FLAG_NAMESPACE = "feature_flag"

    @classmethod
    def config(cls, key: str) -> str:
        """生成动态配置 key。"""
        return f"{cls.CONFIG_PREFIX}:{key}"

    @classmethod
    def feature_flag(cls, flag_key: str) -> str:
        """生成功能开关在动态配置中的相对 key（交给 config() 拼接前缀）。"""
        return f"{cls.FEATURE_FLAG_NAMESPACE}:{flag_key}"
