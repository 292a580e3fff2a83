"""
句子管理 API 路由
"""
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from sentence_clipboard.models import Sentence
from sentence_clipboard.services.sentence_service import SentenceService

router = APIRouter(prefix="/sentences", tags=["句子管理"])

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


# ============ 请求/响应模型 ============

class SentencePayload(BaseModel):
    """创建/更新句子请求，两个字段都可省略"""
    content: Optional[str] = None
    group: Optional[str] = None


class MessageResponse(BaseModel):
    """消息响应"""
    message: str


class CopyResponse(BaseModel):
    """复制响应"""
    message: str
    content: str


# ============ 辅助函数 ============

def get_sentence_service(request: Request) -> SentenceService:
    """从应用状态中取出服务实例"""
    return request.app.state.sentence_service


def _parse_sentence_id(raw: str) -> int:
    if not _ID_PATTERN.fullmatch(raw):
        raise HTTPException(status_code=400, detail="无效的ID")
    return int(raw)


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(item) for item in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


async def _read_payload(request: Request) -> SentencePayload:
    """读取并解析请求体，失败时返回 400"""
    body = await request.body()
    try:
        return SentencePayload.model_validate_json(body)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=f"无效的请求数据: {_format_validation_error(e)}",
        )


# ============ API 接口 ============

@router.options("", include_in_schema=False)
@router.options("/{path:path}", include_in_schema=False)
def preflight() -> Response:
    """预检请求"""
    return Response(status_code=200, media_type="application/json")


@router.get("", response_model=list[Sentence])
def list_sentences(
    group: Optional[str] = None,
    service: SentenceService = Depends(get_sentence_service),
):
    """获取句子列表，按复制次数降序"""
    return service.list_sentences(group)


@router.post("", response_model=Sentence, status_code=201)
async def create_sentence(
    request: Request,
    service: SentenceService = Depends(get_sentence_service),
):
    """添加句子"""
    payload = await _read_payload(request)
    try:
        return await run_in_threadpool(service.create_sentence, payload.content, payload.group)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{sentence_id}", response_model=MessageResponse)
async def update_sentence(
    sentence_id: str,
    request: Request,
    service: SentenceService = Depends(get_sentence_service),
):
    """更新句子内容或分组"""
    parsed_id = _parse_sentence_id(sentence_id)
    payload = await _read_payload(request)

    updated = await run_in_threadpool(
        service.update_sentence, parsed_id, payload.content, payload.group
    )
    if not updated:
        raise HTTPException(status_code=404, detail="句子不存在")

    return MessageResponse(message="更新成功")


@router.delete("/{sentence_id}", response_model=MessageResponse)
def delete_sentence(
    sentence_id: str,
    service: SentenceService = Depends(get_sentence_service),
):
    """删除句子"""
    if not service.delete_sentence(_parse_sentence_id(sentence_id)):
        raise HTTPException(status_code=404, detail="句子不存在")

    return MessageResponse(message="删除成功")


@router.post("/{sentence_id}/copy", response_model=CopyResponse)
def copy_sentence(
    sentence_id: str,
    service: SentenceService = Depends(get_sentence_service),
):
    """复制句子，复制次数 +1"""
    content = service.copy_sentence(_parse_sentence_id(sentence_id))
    if content is None:
        raise HTTPException(status_code=404, detail="句子不存在")

    return CopyResponse(message="复制成功", content=content)


# 必须放在最后：其余单条句子路径先校验 ID，再返回 405
@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"],
    include_in_schema=False,
)
def method_not_allowed(path: str):
    _parse_sentence_id(path.split("/", 1)[0])
    raise HTTPException(status_code=405, detail="Method not allowed")
