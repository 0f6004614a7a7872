"""Built-in demo corpus, used when no corpus file is configured."""

from kitab_tui.data.corpus import Corpus

DEMO_CORPUS = [
    {
        "name": "العهد القديم",
        "books": [
            {
                "name": "التكوين",
                "chapters": [
                    {
                        "number": 1,
                        "verses": [
                            {"number": 1, "text": "فِي الْبَدْءِ خَلَقَ اللهُ السَّمَاوَاتِ وَالأَرْضَ."},
                            {
                                "number": 2,
                                "text": "وَكَانَتِ الأَرْضُ خَرِبَةً وَخَالِيَةً، وَعَلَى وَجْهِ الْغَمْرِ ظُلْمَةٌ، "
                                "وَرُوحُ اللهِ يَرِفُّ عَلَى وَجْهِ الْمِيَاهِ.",
                            },
                            {"number": 3, "text": "وَقَالَ اللهُ: «لِيَكُنْ نُورٌ»، فَكَانَ نُورٌ."},
                        ],
                    },
                    {
                        "number": 2,
                        "verses": [
                            {"number": 1, "text": "فَأُكْمِلَتِ السَّمَاوَاتُ وَالأَرْضُ وَكُلُّ جُنْدِهَا."},
                            {"number": 2, "text": "وَفَرَغَ اللهُ فِي الْيَوْمِ السَّابعِ مِنْ عَمَلِهِ الَّذِي عَمِلَ."},
                        ],
                    },
                ],
            },
            {
                "name": "المزامير",
                "chapters": [
                    {
                        "number": 1,
                        "verses": [
                            {
                                "number": 1,
                                "text": "طُوبَى لِلرَّجُلِ الَّذِي لَمْ يَسْلُكْ فِي مَشُورَةِ الأَشْرَارِ، "
                                "وَفِي طَرِيقِ الْخُطَاةِ لَمْ يَقِفْ، وَفِي مَجْلِسِ الْمُسْتَهْزِئِينَ لَمْ يَجْلِسْ.",
                            },
                            {"number": 2, "text": "لكِنْ فِي نَامُوسِ الرَّبِّ مَسَرَّتُهُ، وَفِي نَامُوسِهِ يَلْهَجُ نَهَارًا وَلَيْلاً."},
                        ],
                    },
                ],
            },
        ],
    },
    {
        "name": "العهد الجديد",
        "books": [
            {
                "name": "يوحنا",
                "chapters": [
                    {
                        "number": 1,
                        "verses": [
                            {
                                "number": 1,
                                "text": "فِي الْبَدْءِ كَانَ الْكَلِمَةُ، وَالْكَلِمَةُ كَانَ عِنْدَ اللهِ، وَكَانَ الْكَلِمَةُ اللهَ.",
                            },
                            {"number": 2, "text": "هذَا كَانَ فِي الْبَدْءِ عِنْدَ اللهِ."},
                            {"number": 3, "text": "كُلُّ شَيْءٍ بِهِ كَانَ، وَبِغَيْرِهِ لَمْ يَكُنْ شَيْءٌ مِمَّا كَانَ."},
                        ],
                    },
                ],
            },
        ],
    },
]


def demo_corpus() -> Corpus:
    """Return the demo corpus."""
    return Corpus.from_data(DEMO_CORPUS)
