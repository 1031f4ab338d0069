from strategies import strategy_prompt_lines

# --- DIFFICULTY LEVELS ---
LEVELS = {
    "easy": {
        "label": "初級",
        "description": "誰もが共通のイメージを持つ具体的な物体（例：おにぎり、ハサミ、傘、電車など）",
    },
    "normal": {
        "label": "中級",
        "description": "複数の要素が組み合わさった日常的な概念や場所（例：友情、動物園、誕生日、通勤など）",
    },
    "hard": {
        "label": "上級",
        "description": "視覚化しづらい感情や、説明に工夫が必要な複雑な事象（例：断捨離、絶望、デジャブ、孤独など）",
    },
}

# Turn from which the straight-man is told to steer toward the answer
LEAD_IN_TURN = 5

PLAYER = "駒場"
PARTNER = "内海"


def format_history(history):
    return "\n".join(
        f"{PLAYER if h.get('role') == 'user' else PARTNER}: {h.get('content', '')}" for h in history
    )


def get_topic_prompt(level):
    info = LEVELS.get(level, LEVELS["normal"])
    return f"""
    あなたはミルクボーイ風の漫才ゲームのお題を生成するAIです。

    難易度: {info['label']}
    条件: {info['description']}

    以下の条件でお題となる言葉を1つ生成し、その言葉を大きく分類する「カテゴリ名」も生成してください。
    1. お題(topic): ユーザーが説明しがいのある具体的な言葉
    2. カテゴリ(category): その言葉が含まれる大きな分類（例：「コーンフレーク」なら「朝ごはん」、「スマホ」なら「機械」）

    OUTPUT JSON:
    {{"topic": "おにぎり", "category": "食べ物"}}
    """


def get_respond_prompt(topic, hint, history, turn_count):
    lead_in = ""
    if turn_count >= LEAD_IN_TURN:
        lead_in = "そろそろ正解に導いてもいい頃です。ヒントが少しでも近ければ正解として締めくくってください。"

    return f"""
    あなたはミルクボーイの{PARTNER}さん（ツッコミ担当）です。
    相方の{PLAYER}さん（ユーザー）が「オカンが好きなもの」を説明していますが、オカンはその名前を忘れてしまいました。

    【正解のお題】: {topic}（これはユーザーには教えないでください）
    【現在のターン数】: {turn_count}

    【これまでの会話】:
    {format_history(history) or "（まだありません）"}

    【{PLAYER}の新しいヒント】: {hint}

    GOAL:
    1. ヒントから推測される言葉を1つ決めて "guess" に入れる。
    2. その推測がお題（{topic}）と同じか十分に近ければ "isCorrect" を true にする。
    3. "responseV1": 「ほな〇〇やないかい！」と推測を肯定し、庶民的な偏見や誇張した特徴を関西弁で述べる。
    4. "responseV2": {PLAYER}に「〇〇ではないらしい」と言われた後の返し。「ほな〇〇と違うかぁ」と撤回し、否定の理由を庶民的な偏見で述べ、次のヒントを促す。
    {lead_in}

    RULES:
    - 正解でない限り、お題（{topic}）を直接言わない。
    - 〇〇には "guess" を入れる。

    OUTPUT JSON:
    {{
        "guess": "推測した言葉",
        "isCorrect": false,
        "responseV1": "ほな〇〇やないかい！ ...",
        "responseV2": "ほな〇〇と違うかぁ。 ..."
    }}
    """


def get_analysis_prompt(topic, hints):
    numbered = "\n".join(f"ターン{i}: {hint}" for i, hint in enumerate(hints, start=1))
    return f"""
    あなたは翻訳学の専門家です。以下の会話を分析し、ユーザーが使用した翻訳ストラテジーを特定してください。

    【お題】: {topic}

    【ユーザーのヒント一覧】:
    {numbered}

    【16の翻訳ストラテジー】:
    {strategy_prompt_lines()}

    GOAL:
    各ターンで、ユーザーがどの翻訳ストラテジーを使用したかを判定し、全体の傾向を2-3文でまとめる。

    OUTPUT JSON:
    {{
        "analysis": [
            {{
                "turn": 1,
                "userHint": "ユーザーのヒント",
                "strategy": "ストラテジーのid",
                "strategyName": "ストラテジーの日本語名",
                "explanation": "そう判断した理由（1-2文）"
            }}
        ],
        "summary": "全体的な翻訳傾向のまとめ"
    }}
    """


def get_script_prompt(topic, history):
    return f"""
    あなたはミルクボーイの漫才台本作家です。以下の会話履歴を元に、完成版のミルクボーイ風漫才台本を作成してください。

    【お題】: {topic}

    【会話履歴】:
    {format_history(history)}

    RULES:
    1. 冒頭に「どうもー！ミルクボーイです！」を入れる。
    2. {PLAYER}が「オカンが好きな〇〇があるらしいんやけど、その名前を忘れたらしくてね」で始める。
    3. 会話履歴を元に、より漫才らしく整える。
    4. 最後に「{topic}やないかい！」でオチをつける。
    5. 締めに「ありがとうございましたー！」を入れる。

    OUTPUT FORMAT:
    {PLAYER}「セリフ」
    {PARTNER}「セリフ」
    """
