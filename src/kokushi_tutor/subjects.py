"""Subject catalog and the subject -> question-id index used by custom tabs."""
from kokushi_tutor.models import Question, Subject

# Names match the category / keyword strings carried by the question data.
SUBJECT_CATEGORIES = {
    "基礎系": [
        Subject("anatomy", "解剖学", "解剖学", "#3B82F6"),
        Subject("histology", "組織学", "組織学", "#6366F1"),
        Subject("physiology", "生理学", "生理学", "#8B5CF6"),
        Subject("biochemistry", "生化学", "生化学", "#A855F7"),
        Subject("pathology", "病理学", "病理学", "#D946EF"),
        Subject("microbiology", "微生物学", "微生物学", "#EC4899"),
        Subject("pharmacology", "薬理学", "薬理学", "#F43F5E"),
        Subject("materials", "歯科理工学", "理工学", "#EF4444"),
    ],
    "臨床系": [
        Subject("operative", "保存修復学", "保存修復", "#F59E0B"),
        Subject("endodontics", "歯内療法学", "歯内療法", "#EAB308"),
        Subject("periodontics", "歯周病学", "歯周病", "#84CC16"),
        Subject("crown_bridge", "クラウンブリッジ", "クラブリ", "#22C55E"),
        Subject("partial_denture", "部分床義歯学", "パーシャル", "#10B981"),
        Subject("complete_denture", "全部床義歯学", "フルデン", "#14B8A6"),
        Subject("implant", "口腔インプラント学", "インプラ", "#06B6D4"),
        Subject("oral_surgery", "口腔外科学", "口外", "#0EA5E9"),
        Subject("radiology", "歯科放射線学", "放射線", "#0284C7"),
        Subject("anesthesia", "歯科麻酔学", "麻酔", "#2563EB"),
        Subject("orthodontics", "矯正歯科学", "矯正", "#4F46E5"),
        Subject("pedodontics", "小児歯科学", "小児", "#7C3AED"),
    ],
    "社会歯科・その他": [
        Subject("hygiene", "衛生学", "衛生", "#9333EA"),
        Subject("geriatric", "高齢者歯科学", "高齢者", "#C026D3"),
    ],
}


def get_all_subjects() -> list[Subject]:
    return [s for subjects in SUBJECT_CATEGORIES.values() for s in subjects]


def get_subject_by_id(subject_id: str) -> Subject | None:
    for subject in get_all_subjects():
        if subject.id == subject_id:
            return subject
    return None


def get_subject_by_name(name: str) -> Subject | None:
    for subject in get_all_subjects():
        if subject.name == name:
            return subject
    return None


def build_subject_index(questions: list[Question]) -> dict[str, frozenset]:
    """Map every subject id to the ids of questions tagged with it.

    A question is tagged by its category and by each of its keywords.
    Subjects with no questions map to an empty set.
    """
    by_name = {s.name: s.id for s in get_all_subjects()}
    index = {s.id: set() for s in get_all_subjects()}
    for q in questions:
        names = list(q.keywords)
        if q.category:
            names.append(q.category)
        for name in names:
            subject_id = by_name.get(name)
            if subject_id:
                index[subject_id].add(q.id)
    return {subject_id: frozenset(ids) for subject_id, ids in index.items()}
