import pytest

from kokushi_tutor.corpus import build_corpus


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tutor.db")
    return db_path


def _choices(*texts):
    return dict(zip("abcde", texts))


RAW_QUESTIONS = [
    {
        "id": "102A30", "year": 102, "session": "A", "number": 30,
        "questionText": "濃度 25% の溶液 50 mL に含まれる溶質は何 g か。",
        "choices": _choices("2.5", "5.0", "12.5", "25.0", "50.0"),
        "choiceCount": 1, "answer": "12.5",
    },
    {
        "id": "105C10", "year": 105, "session": "C", "number": 10,
        "questionText": "補綴装置の設計で適切なのはどれか。",
        "choices": _choices("鋳造鉤", "線鉤", "レスト", "隣接面板", "大連結子"),
        "choiceCount": 1, "answer": "", "isExcluded": True,
    },
    {
        "id": "110B12", "year": 110, "session": "B", "number": 12,
        "questionText": "グラスアイオノマーセメントの特徴はどれか。",
        "choices": _choices("フッ化物徐放性", "高い曲げ強さ", "光重合のみで硬化する", "歯質と接着しない", "不透明"),
        "choiceCount": 1, "answer": "a", "category": "歯科理工学",
    },
    {
        "id": "112A1", "year": 112, "session": "A", "number": 1,
        "questionText": "齲蝕の主な原因菌はどれか。",
        "choices": _choices(
            "Streptococcus mutans", "Porphyromonas gingivalis", "Candida albicans",
            "Actinomyces israelii", "Treponema denticola",
        ),
        "choiceCount": 1, "answer": "a", "category": "微生物学",
    },
    {
        "id": "112B48", "year": 112, "session": "B", "number": 48,
        "questionText": "窩洞形成時の注意点で正しいのはどれか。2つ選べ。",
        "choices": _choices("齲蝕象牙質を除去する", "遊離エナメル質を保存する", "窩縁を整理する", "髄角を露出させる", "注水せずに切削する"),
        "choiceCount": 2, "answer": "ac", "hasFigure": True,
        "images": ["/images/112回_Web画像/112B48.png"], "keywords": ["保存修復学"],
    },
    {
        "id": "113A50", "year": 113, "session": "A", "number": 50,
        "questionText": "齲蝕リスク検査で評価するのはどれか。",
        "choices": _choices("歯肉溝滲出液量", "唾液緩衝能", "咬合力", "開口量", "舌圧"),
        "choiceCount": 1, "answer": "b", "category": "衛生学",
    },
    {
        "id": "118A2", "year": 118, "session": "A", "number": 2,
        "questionText": "", "choices": {}, "answer": "",
    },
    {
        "id": "118A10", "year": 118, "session": "A", "number": 10,
        "questionText": "Streptococcus sobrinus について正しいのはどれか。",
        "choices": _choices("グラム陰性", "偏性嫌気性", "芽胞形成", "不溶性グルカン産生", "らせん菌"),
        "choiceCount": 1, "answer": "d", "category": "微生物学",
    },
    {
        "id": "118D3", "year": 118, "session": "D", "number": 3,
        "questionText": "根管治療の手順を正しく並べよ。",
        "choices": _choices("根管充填", "髄室開拡", "根管拡大", "根管洗浄", "仮封"),
        "choiceCount": 5, "answer": "bcdae", "keywords": ["歯内療法学"],
    },
]


@pytest.fixture
def raw_corpus():
    return {
        "meta": {
            "version": "1.1.0", "lastUpdated": "2025-01-01", "totalCount": 9,
            "withImagesCount": 1, "yearRange": {"min": 102, "max": 118},
        },
        "questions": [dict(q) for q in RAW_QUESTIONS],
    }


@pytest.fixture
def corpus(raw_corpus):
    return build_corpus(raw_corpus)


@pytest.fixture
def questions(corpus):
    return corpus.questions
