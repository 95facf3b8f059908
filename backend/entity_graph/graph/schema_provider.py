"""
FormSchemaProvider -- 组件表单 schema 的异步查找

TriggerIndex 通过 load_schema(domain, form_id) 获取组件的字段 schema，
只用于发现哪些字段引用了事件。

实现:
  - InMemoryFormSchemaProvider: 预置 dict（测试 / 嵌入式使用）
  - FileFormSchemaProvider:     <forms_dir>/<domain>/<form_id>.form.json
  - HttpFormSchemaProvider:     <base_url>/<domain>/<form_id>.form.json (httpx)

约定:
  - schema 不存在 → None（不是错误）
  - 传输失败 / JSON 损坏 / 校验失败 → 记录日志后返回 None
  - 按 (domain, form_id) 缓存，包括 None 结果
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable

import httpx
from pydantic import ValidationError

from entity_graph.config import settings
from entity_graph.models.form import FormDefinition

logger = logging.getLogger(__name__)

FORM_FILE_SUFFIX = ".form.json"


def form_id_for_component(component_id: str) -> str:
    """'minecraft:behavior.float' → 'minecraft_behavior_float'"""
    return component_id.replace(":", "_").replace(".", "_")


@runtime_checkable
class FormSchemaProvider(Protocol):
    async def load_schema(self, domain: str, form_id: str) -> Optional[FormDefinition]:
        ...


def _parse_form(payload: Any, source: str) -> Optional[FormDefinition]:
    if isinstance(payload, FormDefinition):
        return payload
    if not isinstance(payload, dict):
        logger.warning("[FormSchemaProvider] 表单 '%s' 不是 JSON object，忽略", source)
        return None
    try:
        return FormDefinition.model_validate(payload)
    except ValidationError as exc:
        logger.warning("[FormSchemaProvider] 表单 '%s' 校验失败: %s", source, exc)
        return None


class _CachingFormSchemaProvider:
    """按 (domain, form_id) 缓存查找结果，子类实现 _fetch()。

    缓存 key 不区分大小写；_fetch() 收到调用方传入的原始 id。
    """

    def __init__(self) -> None:
        self._cache: Dict[Tuple[str, str], Optional[FormDefinition]] = {}

    async def load_schema(self, domain: str, form_id: str) -> Optional[FormDefinition]:
        key = (domain.lower(), form_id.lower())
        if key in self._cache:
            logger.debug("[%s] 缓存命中: %s/%s", type(self).__name__, *key)
            return self._cache[key]

        logger.debug("[%s] 缓存未命中: %s/%s", type(self).__name__, *key)
        form = await self._fetch(domain, form_id)
        self._cache[key] = form
        return form

    async def _fetch(self, domain: str, form_id: str) -> Optional[FormDefinition]:
        raise NotImplementedError

    def clear_cache(self) -> None:
        self._cache.clear()


class InMemoryFormSchemaProvider(_CachingFormSchemaProvider):
    """预置 schema: {domain: {form_id: FormDefinition | dict}}。"""

    def __init__(self, forms: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        super().__init__()
        self._forms: Dict[str, Dict[str, Any]] = {}
        for domain, by_id in (forms or {}).items():
            for form_id, form in by_id.items():
                self.add_form(domain, form_id, form)

    def add_form(self, domain: str, form_id: str, form: Any) -> None:
        self._forms.setdefault(domain.lower(), {})[form_id.lower()] = form
        self._cache.pop((domain.lower(), form_id.lower()), None)

    async def _fetch(self, domain: str, form_id: str) -> Optional[FormDefinition]:
        payload = self._forms.get(domain.lower(), {}).get(form_id.lower())
        if payload is None:
            return None
        return _parse_form(payload, f"{domain}/{form_id}")


class FileFormSchemaProvider(_CachingFormSchemaProvider):
    """从本地目录读取 <forms_dir>/<domain>/<form_id>.form.json。"""

    def __init__(self, forms_dir: Optional[str] = None) -> None:
        super().__init__()
        self.forms_dir = Path(forms_dir or settings.forms_dir)

    def _path_for(self, domain: str, form_id: str) -> Path:
        return self.forms_dir / domain / f"{form_id}{FORM_FILE_SUFFIX}"

    def _read_sync(self, path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    async def _fetch(self, domain: str, form_id: str) -> Optional[FormDefinition]:
        path = self._path_for(domain, form_id)
        if not path.exists():
            logger.debug("[FileFormSchemaProvider] 表单不存在: %s", path)
            return None

        loop = asyncio.get_running_loop()
        try:
            payload = await loop.run_in_executor(None, self._read_sync, path)
        except (OSError, ValueError) as exc:
            logger.warning("[FileFormSchemaProvider] 读取表单失败 %s: %s", path, exc)
            return None

        return _parse_form(payload, str(path))


class HttpFormSchemaProvider(_CachingFormSchemaProvider):
    """从内容服务器获取 <base_url>/<domain>/<form_id>.form.json。

    client 可注入（测试用 httpx.MockTransport）；未注入时每次请求新建 AsyncClient。
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        super().__init__()
        self.base_url = (base_url if base_url is not None else settings.forms_base_url).rstrip("/")
        self._client = client
        self._timeout = httpx.Timeout(
            timeout_seconds if timeout_seconds is not None else settings.http_timeout_seconds
        )

    def _url_for(self, domain: str, form_id: str) -> str:
        return f"{self.base_url}/{domain}/{form_id}{FORM_FILE_SUFFIX}"

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.get(url)

    async def _fetch(self, domain: str, form_id: str) -> Optional[FormDefinition]:
        url = self._url_for(domain, form_id)
        try:
            response = await self._get(url)
            if response.status_code == 404:
                logger.debug("[HttpFormSchemaProvider] 表单不存在: %s", url)
                return None
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            logger.warning("[HttpFormSchemaProvider] 获取表单失败 %s: %s", url, exc)
            return None
        except ValueError as exc:
            logger.warning("[HttpFormSchemaProvider] 表单 JSON 无效 %s: %s", url, exc)
            return None

        return _parse_form(payload, url)
