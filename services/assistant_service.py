# services/assistant_service.py
"""
AI assistant for the quotation form, backed by Gemini.

The assistant only reads a summary of the current order; cost and profit
figures are replaced by "hidden" unless the caller is the owner.
"""
import json
from typing import Any, Dict, List, Optional, Tuple

import google.generativeai as genai

import config
from domain.models import Order, Role
from services.pricing_service import compute_totals
from services.stats_service import MonthlyStats
from utils.formatting import format_number
from utils.logger import get_logger

logger = get_logger("assistant_service")

HIDDEN = "hidden"
FALLBACK_EMPTY = "Xin lỗi, tôi gặp sự cố khi xử lý câu hỏi này."
FALLBACK_ERROR = "Đã có lỗi xảy ra khi kết nối với trợ lý AI. Vui lòng kiểm tra kết nối mạng."

QUICK_PROMPTS = {
    "📊 Phân tích đơn này": ("Phân tích đơn hàng hiện tại giúp tôi", False),
    "💬 Soạn tin Zalo": ("Viết 1 mẫu tin nhắn Zalo gửi báo giá chuyên nghiệp", False),
    "💰 Tăng lợi nhuận": ("Làm sao để tăng lợi nhuận cho tháng này?", True),  # owner only
}


def build_context(order: Order, role: Role, stats: Optional[MonthlyStats] = None) -> Dict[str, Any]:
    totals = compute_totals(order)
    is_owner = role is Role.OWNER
    return {
        "currentOrder": {
            "customer": order.customer_name,
            "total": totals.grand_total,
            "items": [f"{i.name} ({format_number(i.quantity)} {i.unit})" for i in order.items],
            "profit": totals.profit if is_owner else HIDDEN,
        },
        "stats": (stats.to_dict() if stats else None) if is_owner else HIDDEN,
        "role": role.value,
    }


def build_system_instruction(context: Dict[str, Any]) -> str:
    return (
        f'Bạn là trợ lý AI thông minh cho cửa hàng "{config.SHOP_NAME}" chuyên vật tư in nhanh.\n'
        "- Bạn trả lời bằng tiếng Việt thân thiện, chuyên nghiệp.\n"
        f"- Bạn biết dữ liệu đơn hàng hiện tại: {json.dumps(context, ensure_ascii=False)}.\n"
        "- Nếu là nhân viên (SALE), hãy giúp họ soạn tin nhắn chào khách, tư vấn kích thước giấy.\n"
        "- Nếu là chủ shop (OWNER), hãy phân tích lợi nhuận, gợi ý giảm giá hoặc tăng năng suất.\n"
        "- Hãy trả lời ngắn gọn, súc tích, đi thẳng vào vấn đề."
    )


class OrderAssistant:
    """Single-turn Q&A; the chat transcript is kept for display only."""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        self.model_name = model_name or config.GEMINI_MODEL
        self.messages: List[Dict[str, str]] = []

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def ask(
            self,
            prompt: str,
            order: Order,
            role: Role,
            stats: Optional[MonthlyStats] = None,
    ) -> Tuple[bool, str]:
        """
        Send `prompt` with the order context. Returns (ok, reply); on any
        failure the reply is a fixed apology and the error is logged.
        """
        prompt = (prompt or "").strip()
        if not prompt:
            return False, ""

        self.messages.append({"role": "user", "text": prompt})

        if not self.enabled:
            reply = "Chưa cấu hình GEMINI_API_KEY cho trợ lý AI."
            self.messages.append({"role": "model", "text": reply})
            return False, reply

        context = build_context(order, role, stats)
        try:
            genai.configure(api_key=self.api_key)
            model = genai.GenerativeModel(
                self.model_name,
                system_instruction=build_system_instruction(context),
            )
            response = model.generate_content(prompt)
            text = (response.text or "").strip()
            ok = bool(text)
            reply = text or FALLBACK_EMPTY
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            ok, reply = False, FALLBACK_ERROR

        self.messages.append({"role": "model", "text": reply})
        return ok, reply

    def reset(self) -> None:
        self.messages = []
