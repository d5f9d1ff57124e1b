"""Mock essential learning catalogue (categories and their content)"""
from typing import List, Optional

CATEGORIES = [
    {
        "id": "1",
        "categoryKey": "junior_high",
        "name": "junior_high_essentials",
        "displayNameCn": "初中必会",
        "displayNameEn": "Junior High Essentials",
        "targetLevel": "A1-A2",
        "totalVocabularyCount": 1500,
        "totalPassagesCount": 50,
        "totalDialoguesCount": 30,
        "estimatedDurationDays": 90,
        "isPopular": False,
        "difficultyColor": "#4CAF50",
    },
    {
        "id": "2",
        "categoryKey": "senior_high",
        "name": "senior_high_essentials",
        "displayNameCn": "高中必会",
        "displayNameEn": "Senior High Essentials",
        "targetLevel": "A2-B1",
        "totalVocabularyCount": 3500,
        "totalPassagesCount": 100,
        "totalDialoguesCount": 50,
        "estimatedDurationDays": 120,
        "isPopular": False,
        "difficultyColor": "#FF9800",
    },
    {
        "id": "3",
        "categoryKey": "cet4",
        "name": "cet4_essentials",
        "displayNameCn": "四级必会",
        "displayNameEn": "CET-4 Essentials",
        "targetLevel": "B1",
        "totalVocabularyCount": 4500,
        "totalPassagesCount": 100,
        "totalDialoguesCount": 100,
        "estimatedDurationDays": 100,
        "isPopular": True,
        "difficultyColor": "#2196F3",
    },
    {
        "id": "4",
        "categoryKey": "business",
        "name": "business_essentials",
        "displayNameCn": "商务必会",
        "displayNameEn": "Business Essentials",
        "targetLevel": "B1-B2",
        "totalVocabularyCount": 2500,
        "totalPassagesCount": 60,
        "totalDialoguesCount": 80,
        "estimatedDurationDays": 80,
        "isPopular": False,
        "difficultyColor": "#795548",
    },
    {
        "id": "5",
        "categoryKey": "postgraduate",
        "name": "postgraduate_essentials",
        "displayNameCn": "考研必会",
        "displayNameEn": "Postgraduate Essentials",
        "targetLevel": "B2-C1",
        "totalVocabularyCount": 5500,
        "totalPassagesCount": 200,
        "totalDialoguesCount": 80,
        "estimatedDurationDays": 150,
        "isPopular": True,
        "difficultyColor": "#F44336",
    },
]

CONTENT = [
    {
        "id": "1",
        "categoryId": "3",
        "contentType": "vocabulary",
        "title": "CET-4 Core Vocabulary - Unit 1",
        "subtitle": "大学英语四级核心词汇第一单元",
        "difficultyLevel": "intermediate",
        "contentData": {
            "words": [
                {
                    "word": "abandon",
                    "pronunciation": "/əˈbændən/",
                    "meaning": "放弃，抛弃",
                    "example": "He abandoned his car in the snow.",
                    "chineseMeaning": "放弃，抛弃",
                },
                {
                    "word": "abstract",
                    "pronunciation": "/ˈæbstrækt/",
                    "meaning": "抽象的",
                    "example": "Mathematics is an abstract subject.",
                    "chineseMeaning": "抽象的",
                },
            ]
        },
        "estimatedLearnTime": 30,
        "importanceScore": 95,
    },
    {
        "id": "2",
        "categoryId": "4",
        "contentType": "dialogues",
        "title": "Business Meeting Introduction",
        "subtitle": "商务会议介绍对话",
        "difficultyLevel": "intermediate",
        "contentData": {
            "scenario": "Meeting Room Introduction",
            "dialogue": [
                {
                    "speaker": "A",
                    "text": "Good morning everyone. Let me introduce myself. I'm Sarah from the marketing department.",
                },
                {
                    "speaker": "B",
                    "text": "Nice to meet you, Sarah. I'm David, the project manager for this initiative.",
                },
            ],
        },
        "estimatedLearnTime": 15,
        "importanceScore": 85,
    },
]


def get_categories() -> List[dict]:
    return CATEGORIES


def get_category(category_id: str) -> Optional[dict]:
    return next((c for c in CATEGORIES if c["id"] == category_id), None)


def get_content(content_id: str) -> Optional[dict]:
    return next((c for c in CONTENT if c["id"] == content_id), None)


def get_category_content(category_id: str, content_type: Optional[str] = None,
                         page: int = 1, limit: int = 10):
    """One page of a category's content plus the unpaged total"""
    items = [c for c in CONTENT if c["categoryId"] == category_id]
    if content_type:
        items = [c for c in items if c["contentType"] == content_type]
    start = (page - 1) * limit
    return items[start:start + limit], len(items)
