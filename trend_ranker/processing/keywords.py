"""
Keyword substitution

沒有人工摘要時的最低限度在地化：把常見技術英文詞替換成中文。
比對不分大小寫、以子字串方式進行，依表格順序逐一替換。
"""

import re
from typing import List, Tuple


# 依表格順序替換：database 必須排在 data 之前
KEYWORD_TABLE: List[Tuple[str, str]] = [
    # AI / 機器學習
    ('ai', '人工智能'),
    ('artificial intelligence', '人工智能'),
    ('machine learning', '机器学习'),
    ('deep learning', '深度学习'),
    ('neural', '神经网络'),
    ('llm', '大语言模型'),
    ('language model', '语言模型'),
    ('gpt', 'GPT'),
    ('chatbot', '聊天机器人'),

    # 開發工具
    ('framework', '框架'),
    ('library', '库'),
    ('tool', '工具'),
    ('developer', '开发者'),
    ('development', '开发'),
    ('cli', '命令行工具'),
    ('sdk', '开发工具包'),
    ('api', '接口'),

    # Web
    ('web', 'Web'),
    ('frontend', '前端'),
    ('backend', '后端'),
    ('fullstack', '全栈'),
    ('react', 'React'),
    ('vue', 'Vue'),
    ('angular', 'Angular'),
    ('node', 'Node.js'),
    ('javascript', 'JavaScript'),
    ('typescript', 'TypeScript'),

    # 資料
    ('database', '数据库'),
    ('data', '数据'),
    ('cache', '缓存'),
    ('server', '服务器'),
    ('cloud', '云'),
    ('docker', 'Docker'),
    ('kubernetes', 'Kubernetes'),

    # 開源
    ('open source', '开源'),
    ('opensource', '开源'),
    ('github', 'GitHub'),
    ('repository', '仓库'),

    # 動作
    ('build', '构建'),
    ('create', '创建'),
    ('manage', '管理'),
    ('deploy', '部署'),
    ('test', '测试'),
    ('monitor', '监控'),
    ('optimize', '优化'),
    ('automate', '自动化'),
    ('generate', '生成'),
    ('parse', '解析'),
    ('convert', '转换'),

    # 形容詞
    ('fast', '快速'),
    ('simple', '简单'),
    ('easy', '易于'),
    ('powerful', '强大'),
    ('modern', '现代'),
    ('lightweight', '轻量级'),
    ('high-performance', '高性能'),
    ('real-time', '实时'),
    ('distributed', '分布式'),

    # 應用領域
    ('crypto', '加密货币'),
    ('blockchain', '区块链'),
    ('video', '视频'),
    ('audio', '音频'),
    ('image', '图像'),
    ('game', '游戏'),
    ('mobile', '移动'),
    ('desktop', '桌面'),

    # 其他
    ('self-hosted', '自托管'),
    ('open-source', '开源'),
    ('cross-platform', '跨平台'),
    ('file', '文件'),
    ('system', '系统'),
    ('plugin', '插件'),
    ('extension', '扩展'),
]

_COMPILED = [(re.compile(re.escape(term), re.IGNORECASE), replacement) for term, replacement in KEYWORD_TABLE]


def substitute_keywords(text: str) -> str:
    """
    替換文字中所有已知的英文關鍵字

    是否命中以原始文字 (小寫) 判斷，替換則作用在累積結果上。

    Args:
        text: 原始描述

    Returns:
        替換後的文字；沒有命中時原樣回傳
    """
    if not text:
        return text

    lowered = text.lower()
    result = text
    for (term, _), (pattern, replacement) in zip(KEYWORD_TABLE, _COMPILED):
        if term in lowered:
            result = pattern.sub(replacement, result)

    return result
