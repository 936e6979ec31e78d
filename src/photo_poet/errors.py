"""
시 생성 프로토콜의 내부 예외 계층

모든 예외는 작업 경계(agents.poet)에서 Failure 결과로 변환되며
호출자에게 전파되지 않습니다.
"""
from photo_poet.models.outcome import ErrorKind


class PoetError(Exception):
    kind: ErrorKind = ErrorKind.MODEL


class ValidationError(PoetError):
    """모델 호출 전에 감지되는 입력 오류 (data URI, tone, length)."""

    kind = ErrorKind.VALIDATION


class ModelError(PoetError):
    """모델 호출 실패 또는 응답 형식 오류."""

    kind = ErrorKind.MODEL


class EmptyResultError(ModelError):
    """모델이 응답했지만 poem 필드가 비어 있거나 없음."""

    kind = ErrorKind.EMPTY_RESULT
