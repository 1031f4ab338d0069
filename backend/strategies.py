# --- 16 TRANSLATION STRATEGIES ---
# Blue cards first (8), then red cards (8).
STRATEGIES = [
    {"id": "amplification", "name": "増幅", "name_en": "Amplification",
     "description": "元の意味をより強く、広く、目立たせるように言い換える。",
     "example": "「寒い」→「凍えるほど寒い」", "color": "blue", "icon": "⬤○○/⬤⬤⬤"},
    {"id": "diffusion", "name": "拡散", "name_en": "Diffusion",
     "description": "ある言葉や意味を、別のジャンルや文脈に広げる。",
     "example": "「エンパス」→「人生の指針」「チームの方向性」", "color": "blue", "icon": "✱"},
    {"id": "divergence", "name": "発散", "name_en": "Divergence",
     "description": "ある言葉から連想できるものを、自由にたくさん出す。",
     "example": "「鯛」→「鯛/尾/笛/クラゲ/蛇/羽根」", "color": "blue", "icon": "◆→→→"},
    {"id": "deletion", "name": "ゼロユニット化", "name_en": "Deletion",
     "description": "あえて何かを削除して、抜けた意味から新たな物語を引き出す。",
     "example": "「父・母・兄・姉」→「母・姉」", "color": "blue", "icon": "○—○/○—○"},
    {"id": "generalization", "name": "一般化", "name_en": "Generalization",
     "description": "共通する部分を発見して、グループやカテゴリの名前に置き換える。",
     "example": "「犬・猫」→「ペット」", "color": "blue", "icon": "▲△△"},
    {"id": "abstraction", "name": "抽象化", "name_en": "Abstraction",
     "description": "具体的な事例や物を、概念的な言葉に変える。",
     "example": "「走る」→「身体を整える習慣」", "color": "blue", "icon": "●—→"},
    {"id": "ethicalization", "name": "倫理化", "name_en": "Ethicalization",
     "description": "すでに倫理的に意味づけられた言葉に、別の視点から新しい意味を与える。",
     "example": "「ピンク」→「女の子はピンクでしょ」", "color": "blue", "icon": "○△○"},
    {"id": "visualization", "name": "視覚化", "name_en": "Visualization",
     "description": "言葉の内容を視覚的なイメージに変換する。",
     "example": "「時間」→「流れている川」の画像", "color": "blue", "icon": "○—□"},
    {"id": "concretion", "name": "具体化", "name_en": "Concretion",
     "description": "抽象的な言葉を、具体的な場面や行動で表す。",
     "example": "「努力」→「朝5時に起きて勉強」", "color": "red", "icon": "▽→⬤"},
    {"id": "condensation", "name": "凝縮", "name_en": "Condensation",
     "description": "たくさんの意味や思いを、一言にギュッと詰め込む。",
     "example": "「うまく言えないけど気になる」→「モヤる」", "color": "red", "icon": "✱→●"},
    {"id": "reduction", "name": "削減", "name_en": "Reduction",
     "description": "長い表現をそぎ落として、必要な要素だけにする。",
     "example": "「いろいろあって疲れた」→「疲れた」", "color": "red", "icon": "■■→■"},
    {"id": "convergence", "name": "収束", "name_en": "Convergence",
     "description": "バラバラな視点や要素を、共通するテーマにまとめる。",
     "example": "「魚・陸続き・海鮮丼」→「居酒屋」", "color": "red", "icon": "◆◆→■"},
    {"id": "culturalTranslation", "name": "文化的変換", "name_en": "Cultural Translation",
     "description": "ある文化特有の言葉を、別の文化にも伝わる形に変える。",
     "example": "「日本」「おせち料理」→「中国」「餃子」", "color": "red", "icon": "○→○"},
    {"id": "substitution", "name": "代用", "name_en": "Substitution",
     "description": "ある言葉を、似た意味や役割の別の言葉に置き換える。",
     "example": "「スマホ」→「ポケットの中のパソコン」", "color": "red", "icon": "■■→■■"},
    {"id": "reordering", "name": "順番変え", "name_en": "Reordering",
     "description": "決まった言葉の順番をあえて変えて、新たな視点や関係性を生み出す。",
     "example": "「男女」→「女男」", "color": "red", "icon": "○□→□○"},
    {"id": "verbalization", "name": "言語化", "name_en": "Verbalization",
     "description": "普段言葉にしていないことを、あえて言葉にする。",
     "example": "「心ななめの気」→「愛おしさ」", "color": "red", "icon": "?→○"},
]

DEFAULT_COLOR = "blue"


def get_strategy_by_id(strategy_id):
    return next((s for s in STRATEGIES if s["id"] == strategy_id), None)


def get_strategy_by_name(name):
    """
    Matches the Japanese name exactly or the English name ignoring case.
    """
    if not name:
        return None
    lowered = name.strip().lower()
    return next(
        (s for s in STRATEGIES if s["name"] == name.strip() or s["name_en"].lower() == lowered),
        None,
    )


def resolve_strategy(strategy_id=None, name=None):
    return get_strategy_by_id(strategy_id) or get_strategy_by_name(name)


def strategy_prompt_lines():
    return "\n".join(f"- {s['name']}（{s['name_en']}）[id: {s['id']}]: {s['description']}" for s in STRATEGIES)
