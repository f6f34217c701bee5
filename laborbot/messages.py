"""Static reply templates."""

from __future__ import annotations

_DIVIDER = "────────────────────"

AI_DISCLAIMER = "⚠️ 本回答由 AI 生成，僅供一般性資訊參考，實際仍以最新官方條文與主管機關解釋為準。"


def help_message() -> str:
    return "\n".join(
        [
            "🙋‍♂️ 勞基法小幫手 - 使用說明",
            "",
            "你可以這樣使用我：",
            "",
            "1️⃣ 關鍵字問答（常見問題）",
            "   - 例：加班費怎麼算？",
            "   - 例：正常工時上限是多少？",
            "   - 例：特休有幾天？",
            "   - 例：被資遣有沒有遣散費？",
            "",
            "2️⃣ 條文查詢",
            "   - 例：查勞基法第30條",
            "   - 例：勞基法24條",
            "   - 例：第 38 條",
            "",
            "3️⃣ 條文關鍵字搜尋（由系統試著配對條文）",
            "   - 例：最低工資怎麼訂 → 可能對應第21條",
            "   - 例：特休沒休完要不要折現 → 可能對應第38條",
            "",
            "4️⃣ 類別示範指令",
            "   - 加班相關：顯示加班類常見問題範例",
            "   - 特休相關：顯示特休／休假類範例",
            "   - 離職相關：顯示離職／資遣類範例",
            "",
            "5️⃣ 加班費試算",
            "   - 例：加班費試算 時薪=183 平日=3 休息日=2",
            "",
            "6️⃣ 直接問 AI",
            "   - 例：ai/ 公司要我簽自願離職書怎麼辦？",
            "   - 想要詳細說明：ai/ 詳細 責任制是合法的嗎？",
            "",
            "隨時輸入「功能」或「help」，可以再次看到這份說明 🙌",
        ]
    )


def overtime_examples_message() -> str:
    return "\n".join(
        [
            "💡 加班相關可以這樣問：",
            "",
            "• 加班費怎麼算？",
            "• 每天被排班 10 小時合法嗎？",
            "• 一個月加班有沒有上限？",
            "• 休息日出勤算加班嗎？",
            "",
            "也可以直接試算：加班費試算 時薪=183 平日=3",
        ]
    )


def annual_leave_examples_message() -> str:
    return "\n".join(
        [
            "💡 特休／休假相關可以這樣問：",
            "",
            "• 我在公司做滿一年有幾天特休？",
            "• 特休沒休完可以換成錢嗎？",
            "• 特休可以分次休嗎？",
            "",
            "你可以直接丟上面任一句，我會根據勞基法第 38 條等相關規定給你說明。",
        ]
    )


def resignation_examples_message() -> str:
    return "\n".join(
        [
            "💡 離職／資遣相關可以這樣問：",
            "",
            "• 我要離職，需要提前多久跟公司說？",
            "• 公司說要資遣我，有沒有遣散費？",
            "• 什麼情況下公司可以資遣員工？",
            "",
            "你可以直接問其中一題，我會參考勞基法第 11、15、16、17 條等相關規定來回覆。",
        ]
    )


def welcome_message() -> str:
    return "\n".join(
        [
            "🐥 嗨～我是「小勞雞」！",
            "",
            "你的勞基法好夥伴，專門破解職場陷阱、守護勞工權益 💪",
            "想知道加班費怎麼算？特休沒休完能不能換錢？",
            "",
            "直接輸入像這樣：",
            "👉 查勞基法第24條",
            "👉 公司資遣多久前要通知？",
            "👉 加班費試算 時薪=183 平日=2",
            "",
            "輸入「功能」看完整使用說明 😎",
        ]
    )


def ai_answer_message(answer: str) -> str:
    return f"🧭 AI 解析結果\n{_DIVIDER}\n{answer.strip()}\n\n{AI_DISCLAIMER}"


def ai_article_message(number: int, answer: str) -> str:
    return f"🧾 你查的是：勞動基準法第 {number} 條\n{_DIVIDER}\n{answer.strip()}\n\n{AI_DISCLAIMER}"


def ai_question_prompt_message() -> str:
    return "\n".join(
        [
            "🤖 請在 ai/ 後面接著輸入你的問題，例如：",
            "ai/ 老闆要我簽切結書放棄加班費，有效嗎？",
            "ai/ 詳細 責任制是合法的嗎？",
        ]
    )


def ai_unavailable_message(question: str) -> str:
    return "\n".join(
        [
            f"你問的是：{question}",
            "",
            "抱歉，AI 服務目前忙碌或暫時無法使用，請稍後再試一次。",
            "你也可以先輸入「功能」，改用關鍵字問答或條文查詢。",
        ]
    )


def article_not_available_message(number: int) -> str:
    return "\n".join(
        [
            f"你查的是：勞基法第 {number} 條",
            "",
            "目前我還沒有這一條的整理資料，也暫時無法使用 AI 協助說明。",
            "建議直接到勞動部或全國法規資料庫查詢最新條文內容。",
        ]
    )


def guidance_message(user_text: str) -> str:
    return "\n".join(
        [
            f"你說的是：{user_text}",
            "",
            "目前我還看不出你在問哪一條勞基法，也暫時無法使用 AI 協助回答。",
            "你可以試著：",
            "• 直接問：加班費怎麼算？",
            "• 查條文：查勞基法第30條、勞基法24條、勞基法38條…",
            "• 試算加班費：加班費試算 時薪=183 平日=3",
            "• 看指令：輸入「功能」取得使用說明與範例。",
        ]
    )
