"""
Built-in vocabulary packs.

Each pack is a themed list of 15 words with phonetics and a short meaning.
A run starts from one pack (or from an imported custom list).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .vocabulary import Vocabulary


@dataclass(frozen=True)
class VocabPack:
    id: str
    name: str
    description: str
    intro_story: str
    words: Tuple[Vocabulary, ...] = field(default_factory=tuple)

    def vocab_list(self) -> List[Vocabulary]:
        return list(self.words)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "introStory": self.intro_story,
            "words": [w.to_dict() for w in self.words],
        }


def _w(word: str, phonetic: str, meaning: str, difficulty: str) -> Vocabulary:
    return Vocabulary.create(word, phonetic=phonetic, meaning=meaning, difficulty=difficulty)


PRESET_PACKS: List[VocabPack] = [
    VocabPack(
        id="scholar",
        name="The Scholar",
        description="Master of Logic & Science. Uses complex spells to draw cards and deal massive damage.",
        intro_story=(
            "You have spent decades in the Great Library, reading of the Spire's chaotic magic. Now, ink bottle in hand, you seek the Source. Logic is your shield; knowledge is your blade."
        ),
        words=(
            _w("Abstract", "/ˈæbstrækt/", "抽象的", "medium"),
            _w("Analyze", "/ˈænəlaɪz/", "分析", "medium"),
            _w("Biology", "/baɪˈɒlədʒi/", "生物学", "medium"),
            _w("Chemistry", "/ˈkemɪstri/", "化学", "medium"),
            _w("Conclusion", "/kənˈkluːʒn/", "结论", "medium"),
            _w("Deduce", "/dɪˈdjuːs/", "推断", "medium"),
            _w("Empirical", "/ɪmˈpɪrɪkl/", "经验主义的", "hard"),
            _w("Hypothesis", "/haɪˈpɒθəsɪs/", "假设", "long"),
            _w("Logic", "/ˈlɒdʒɪk/", "逻辑", "easy"),
            _w("Method", "/ˈmeθəd/", "方法", "easy"),
            _w("Philosophy", "/fəˈlɒsəfi/", "哲学", "long"),
            _w("Theory", "/ˈθɪəri/", "理论", "medium"),
            _w("Research", "/rɪˈsɜːtʃ/", "研究", "medium"),
            _w("Evidence", "/ˈevɪdəns/", "证据", "medium"),
            _w("Concept", "/ˈkɒnsept/", "概念", "easy"),
        ),
    ),
    VocabPack(
        id="merchant",
        name="The Merchant",
        description="A shrewd negotiator. Earns extra Gold and weakens enemies with bad deals.",
        intro_story=(
            "They say the Spire is dangerous. You see only opportunity. With a bag of gold and a silver tongue, you plan to buy the Spire itself."
        ),
        words=(
            _w("Acquire", "/əˈkwaɪə(r)/", "获得", "medium"),
            _w("Benefit", "/ˈbenɪfɪt/", "利益", "medium"),
            _w("Capital", "/ˈkæpɪtl/", "资本", "medium"),
            _w("Debt", "/det/", "债务", "easy"),
            _w("Economy", "/ɪˈkɒnəmi/", "经济", "medium"),
            _w("Finance", "/ˈfaɪnæns/", "金融", "medium"),
            _w("Invest", "/ɪnˈvest/", "投资", "easy"),
            _w("Market", "/ˈmɑːkɪt/", "市场", "easy"),
            _w("Negotiate", "/nɪˈɡəʊʃieɪt/", "谈判", "long"),
            _w("Profit", "/ˈprɒfɪt/", "利润", "easy"),
            _w("Revenue", "/ˈrevənjuː/", "收入", "medium"),
            _w("Trade", "/treɪd/", "贸易", "easy"),
            _w("Value", "/ˈvæljuː/", "价值", "easy"),
            _w("Wealth", "/welθ/", "财富", "easy"),
            _w("Yield", "/jiːld/", "收益", "easy"),
        ),
    ),
    VocabPack(
        id="traveler",
        name="The Traveler",
        description="Agile and quick. Uses 0-cost cards and energy manipulation to outpace foes.",
        intro_story=(
            "You have walked the ends of the earth. The Spire is just another mountain to climb. Your pack is light, your steps are sure."
        ),
        words=(
            _w("Adventure", "/ədˈventʃə(r)/", "冒险", "medium"),
            _w("Border", "/ˈbɔːdə(r)/", "边界", "easy"),
            _w("Culture", "/ˈkʌltʃə(r)/", "文化", "medium"),
            _w("Distance", "/ˈdɪstəns/", "距离", "medium"),
            _w("Explore", "/ɪkˈsplɔː(r)/", "探索", "medium"),
            _w("Foreign", "/ˈfɒrən/", "外国的", "medium"),
            _w("Journey", "/ˈdʒɜːni/", "旅程", "medium"),
            _w("Landscape", "/ˈlændskeɪp/", "风景", "medium"),
            _w("Map", "/mæp/", "地图", "easy"),
            _w("Native", "/ˈneɪtɪv/", "本地的", "medium"),
            _w("Passport", "/ˈpɑːspɔːt/", "护照", "medium"),
            _w("Route", "/ruːt/", "路线", "easy"),
            _w("Tourism", "/ˈtʊərɪzm/", "旅游", "medium"),
            _w("Transit", "/ˈtrænzɪt/", "运输", "medium"),
            _w("Voyage", "/ˈvɔɪɪdʒ/", "航行", "medium"),
        ),
    ),
    VocabPack(
        id="diplomat",
        name="The Diplomat",
        description="Defensive tactician. Builds massive Block and forces enemies to vulnerable states.",
        intro_story=(
            "Words are weapons, and silence is armor. You seek to bring order to the chaos of the Spire through law and decree."
        ),
        words=(
            _w("Agenda", "/əˈdʒendə/", "议程", "medium"),
            _w("Alliance", "/əˈlaɪəns/", "联盟", "medium"),
            _w("Bureaucracy", "/bjʊəˈrɒkrəsi/", "官僚主义", "hard"),
            _w("Committee", "/kəˈmɪti/", "委员会", "medium"),
            _w("Congress", "/ˈkɒŋɡres/", "国会", "medium"),
            _w("Convention", "/kənˈvenʃn/", "公约", "medium"),
            _w("Delegate", "/ˈdelɪɡət/", "代表", "medium"),
            _w("Embassy", "/ˈembəsi/", "大使馆", "medium"),
            _w("Leader", "/ˈliːdə(r)/", "领导者", "easy"),
            _w("Policy", "/ˈpɒləsi/", "政策", "easy"),
            _w("Protocol", "/ˈprəʊtəkɒl/", "协议", "medium"),
            _w("Representative", "/ˌreprɪˈzentətɪv/", "代表", "long"),
            _w("Senate", "/ˈsenət/", "参议院", "medium"),
            _w("Treaty", "/ˈtriːti/", "条约", "easy"),
            _w("Vote", "/vəʊt/", "投票", "easy"),
        ),
    ),
    VocabPack(
        id="artist",
        name="The Artist",
        description="Creative and chaotic. Deals damage to ALL enemies and scales strength over time.",
        intro_story=(
            "The world is grey. The Spire is a canvas waiting for your color. You paint with fire and blood."
        ),
        words=(
            _w("Aesthetic", "/iːsˈθetɪk/", "审美的", "medium"),
            _w("Canvas", "/ˈkænvəs/", "画布", "medium"),
            _w("Create", "/kriˈeɪt/", "创造", "easy"),
            _w("Design", "/dɪˈzaɪn/", "设计", "easy"),
            _w("Exhibit", "/ɪɡˈzɪbɪt/", "展览", "medium"),
            _w("Gallery", "/ˈɡæləri/", "画廊", "medium"),
            _w("Image", "/ˈɪmɪdʒ/", "图像", "easy"),
            _w("Inspire", "/ɪnˈspaɪə(r)/", "激发", "medium"),
            _w("Masterpiece", "/ˈmɑːstəpiːs/", "杰作", "long"),
            _w("Museum", "/mjuˈziːəm/", "博物馆", "medium"),
            _w("Portrait", "/ˈpɔːtreɪt/", "肖像", "medium"),
            _w("Sculpture", "/ˈskʌlptʃə(r)/", "雕塑", "medium"),
            _w("Sketch", "/sketʃ/", "素描", "easy"),
            _w("Studio", "/ˈstjuːdiəʊ/", "工作室", "medium"),
            _w("Style", "/staɪl/", "风格", "easy"),
        ),
    ),
    VocabPack(
        id="engineer",
        name="The Engineer",
        description="High risk, high reward. Sacrifices HP for massive Strength and Energy.",
        intro_story=(
            "If it can be built, it can be broken. You understand the machinery of the Spire better than anyone."
        ),
        words=(
            _w("Algorithm", "/ˈælɡərɪðəm/", "算法", "medium"),
            _w("Circuit", "/ˈsɜːkɪt/", "电路", "medium"),
            _w("Code", "/kəʊd/", "代码", "easy"),
            _w("Compute", "/kəmˈpjuːt/", "计算", "medium"),
            _w("Database", "/ˈdeɪtəbeɪs/", "数据库", "medium"),
            _w("Device", "/dɪˈvaɪs/", "设备", "medium"),
            _w("Digital", "/ˈdɪdʒɪtl/", "数字的", "medium"),
            _w("Hardware", "/ˈhɑːdweə(r)/", "硬件", "medium"),
            _w("Innovation", "/ˌɪnəˈveɪʃn/", "创新", "long"),
            _w("Interface", "/ˈɪntəfeɪs/", "接口", "medium"),
            _w("Network", "/ˈnetwɜːk/", "网络", "medium"),
            _w("Robot", "/ˈrəʊbɒt/", "机器人", "easy"),
            _w("Server", "/ˈsɜːvə(r)/", "服务器", "medium"),
            _w("Software", "/ˈsɒftweə(r)/", "软件", "medium"),
            _w("System", "/ˈsɪstəm/", "系统", "easy"),
        ),
    ),
]

PACKS_BY_ID: Dict[str, VocabPack] = {pack.id: pack for pack in PRESET_PACKS}

DEFAULT_PACK_ID = "scholar"


def get_pack(pack_id: str) -> Optional[VocabPack]:
    return PACKS_BY_ID.get(pack_id)
