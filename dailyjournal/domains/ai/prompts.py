"""Prompt templates sent to the chat-completion API."""

from __future__ import annotations

import json
from typing import Dict, List

ANALYSIS_SYSTEM = "你是一个专业的日记分析助手，擅长分析文本内容并提供深入见解。"

ANALYSIS_TEMPLATE = """
请分析以下日记内容，并提供以下信息：
1. 情绪标签：识别文本中表达的主要情绪（如愉快、焦虑、积极、中立、悲伤等）
2. 主题归纳：提炼句子的重点和主旨（简洁明了，不超过30字）
3. 内容评价：对内容的情感色彩、积极性、深刻度等方面的评价（100-200字）
4. 思考过程：详细说明你是如何分析到这些评价点的（300-500字）
5. 情感分类：将内容情感分为"positive"（积极正向）、"neutral"（中性平和）或"negative"（消极负面）之一
6. 深度分类：将内容深度分为"shallow"（浅层思考）、"moderate"（中等深度）或"deep"（深度思考）之一

日记内容：
{content}

请按以下JSON格式返回结果（不要包含其他内容）：
{{
  "emotion_label": "情绪标签",
  "theme": "主题归纳结果",
  "evaluation": "内容评价结果",
  "thought_process": "思考过程结果",
  "sentiment": "情感分类结果",
  "depth": "深度分类结果"
}}
"""

TASKS_SYSTEM = "你是一个专业的任务提取助手，擅长从文本中识别和提取待办事项。"

TASKS_TEMPLATE = """
请从以下日记内容中识别出用户计划要做的事情。
只关注明确表达了"计划做什么"的内容，例如"今天我要..."、"明天需要..."、"计划本周..."等。
对于每个识别出的任务，请提供以下信息：
1. 任务描述：具体要做的事情
2. 时间上下文：任务计划在什么时间完成（today、tomorrow、this_week、next_week 等）
3. 截止日期：如果能推断出具体日期，请以YYYY-MM-DD格式提供

请以JSON格式返回结果，格式如下：
{{
  "tasks": [
    {{
      "description": "任务描述",
      "time_context": "时间上下文",
      "deadline": "YYYY-MM-DD或null"
    }}
  ]
}}

如果没有识别出任何任务，请返回 {{"tasks": []}}。

日记内容：
{content}
"""

WEEKLY_SYSTEM = "你是一个专业的个人发展顾问，擅长分析日记内容并提供有价值的成长建议。"

WEEKLY_TEMPLATE = """
请根据以下一周的日记和已完成的任务，生成一份周报总结。
包括以下内容：
1. 本周概述：对一周整体情况的简要总结（100-150字）
2. 主题分析：分析一周日记中出现的主要主题和关注点（150-200字）
3. 情绪趋势：分析一周的情绪变化趋势（100-150字）
4. 成就回顾：总结已完成的任务和取得的成就（100-150字）
5. 成长建议：基于日记内容，提供3-5条有针对性的成长建议（200-300字）

本周日记：
{journals}

已完成任务：
{tasks}

请按以下JSON格式返回结果（不要包含其他内容）：
{{
  "week_overview": "本周概述内容",
  "theme_analysis": "主题分析内容",
  "mood_trend": "情绪趋势内容",
  "achievements": "成就回顾内容",
  "growth_suggestions": "成长建议内容"
}}
"""


def _messages(system: str, user: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def analysis_messages(content: str) -> List[Dict[str, str]]:
    return _messages(ANALYSIS_SYSTEM, ANALYSIS_TEMPLATE.format(content=content))


def task_messages(content: str) -> List[Dict[str, str]]:
    return _messages(TASKS_SYSTEM, TASKS_TEMPLATE.format(content=content))


def weekly_report_messages(journals: List[dict], tasks: List[dict]) -> List[Dict[str, str]]:
    return _messages(
        WEEKLY_SYSTEM,
        WEEKLY_TEMPLATE.format(
            journals=json.dumps(journals, ensure_ascii=False, indent=2),
            tasks=json.dumps(tasks, ensure_ascii=False, indent=2),
        ),
    )
