"""
配置管理模块
"""
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict
from dotenv import load_dotenv

# 加载环境变量
load_dotenv()

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """状态图构建配置"""

    # 单次构建的状态节点上限（超出后不再展开）
    max_states: int = int(os.getenv("ENTITY_GRAPH_MAX_STATES", "1024"))

    # 仅在未修改的基础实体上生效的组件
    # minecraft:genetics 的 birth_event 只在实体出生时触发
    base_only_component_id: str = os.getenv(
        "ENTITY_GRAPH_BASE_ONLY_COMPONENT",
        "minecraft:genetics",
    )

    # 表单 schema 查找
    form_domain: str = os.getenv("ENTITY_GRAPH_FORM_DOMAIN", "entity")
    forms_dir: str = os.getenv("ENTITY_GRAPH_FORMS_DIR", "./data/forms")
    forms_base_url: str = os.getenv("ENTITY_GRAPH_FORMS_BASE_URL", "")
    http_timeout_seconds: float = float(os.getenv("ENTITY_GRAPH_HTTP_TIMEOUT", "10.0"))

    model_config = ConfigDict(env_file=".env", case_sensitive=False)


# 全局配置实例
settings = Settings()


def validate_config() -> bool:
    """
    验证配置是否可用

    Returns:
        bool: 配置是否有效
    """
    if settings.max_states < 1:
        logger.warning("[Config] max_states 必须 >= 1，当前值: %d", settings.max_states)
        return False

    if not Path(settings.forms_dir).exists():
        logger.warning("[Config] 表单目录不存在: %s", settings.forms_dir)
        return False

    return True
