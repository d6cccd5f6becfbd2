"""AI analysis of dashboard data through the chat completions gateway."""
import json

import openai

from api.insights.schemas import AnalysisData, AnalysisRequest
from config.settings import AI_MAX_TOKENS
from core.exceptions import InternalError, PaymentRequiredError, RateLimitError
from services.llm_client import LLMClient
from utils.logger import get_logger

logger = get_logger(__name__)


SYSTEM_PROMPTS = {
    "performance": (
        "You are a smart performance analyst. Analyze task and team data and provide a "
        "comprehensive performance evaluation with strengths and weaknesses. Be concise and specific."
    ),
    "workload": (
        "You are a workload balance expert. Analyze task distribution across employees and "
        "departments, identify overloaded and underloaded resources. Provide specific "
        "redistribution recommendations."
    ),
    "risks": (
        "You are a risk analyst. Identify potential risks from data such as delayed tasks, "
        "overloaded employees, struggling departments. Classify risks by severity (high, medium, low)."
    ),
    "recommendations": (
        "You are a smart management consultant. Based on the data, provide 5 practical and "
        "actionable recommendations to improve overall performance. Focus on priorities."
    ),
}

ARABIC_RESPONSE_INSTRUCTION = " Respond in Arabic."

# Caller-facing gateway errors for Arabic clients
ARABIC_GATEWAY_MESSAGES = {
    RateLimitError: "تم تجاوز حد الطلبات، يرجى المحاولة لاحقاً",
    PaymentRequiredError: "يرجى إضافة رصيد لاستخدام الذكاء الاصطناعي",
}

TASK_STATUSES = {"pending": "pending", "inProgress": "in_progress", "completed": "completed"}
TASK_PRIORITIES = ("urgent", "high", "medium", "low")


def _count(items: list[dict], key: str, value: str) -> int:
    return sum(1 for item in items if item.get(key) == value)


def gateway_error(error_class, language: str):
    """Build a 429/402 error with the message in the caller's language."""
    if language == "ar":
        return error_class(ARABIC_GATEWAY_MESSAGES[error_class])
    return error_class()


def build_system_prompt(analysis_type: str, language: str) -> str:
    prompt = SYSTEM_PROMPTS[analysis_type]
    if language == "ar":
        prompt += ARABIC_RESPONSE_INSTRUCTION
    return prompt


def build_summary(data: AnalysisData) -> dict:
    """Reduce raw dashboard rows to the counts the model needs."""
    tasks = data.tasks
    return {
        "summary": {
            "totalTasks": len(tasks),
            "completedTasks": _count(tasks, "status", "completed"),
            "delayedTasks": data.delayed_tasks or 0,
            "completionRate": data.completion_rate or 0,
            "totalEmployees": len(data.employees),
            "departments": len(data.departments),
        },
        "tasksByStatus": {
            label: _count(tasks, "status", status)
            for label, status in TASK_STATUSES.items()
        },
        "tasksByPriority": {
            priority: _count(tasks, "priority", priority)
            for priority in TASK_PRIORITIES
        },
    }


def analyze(request: AnalysisRequest, client: LLMClient) -> str:
    """Run one analysis. Gateway failures map to caller-safe errors."""
    if not client.is_configured():
        raise InternalError("AI gateway key is not configured")

    messages = [
        {"role": "system", "content": build_system_prompt(request.type, request.language)},
        {"role": "user", "content": json.dumps(build_summary(request.data))},
    ]

    try:
        content, _ = client.chat_completion(messages, max_tokens=AI_MAX_TOKENS)
    except openai.RateLimitError:
        raise gateway_error(RateLimitError, request.language)
    except openai.APIStatusError as exc:
        if exc.status_code == 402:
            raise gateway_error(PaymentRequiredError, request.language)
        logger.error(f"AI gateway error: {exc.status_code} {exc.message}")
        raise InternalError(f"AI gateway error {exc.status_code}")
    except openai.OpenAIError as exc:
        logger.error(f"AI gateway error: {exc}")
        raise InternalError("AI gateway unreachable")

    return content
