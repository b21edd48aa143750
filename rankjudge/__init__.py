"""LLM-judged comparison of two search result lists.

Modules:
- judge: relevance judge client (ollama) and prompt
- grading: parse "##final score: N" responses
- scorer: judge the head of one ranked list
- metrics: gain, DCG, nDCG, expected utility (0-10)
- evaluate: compare two lists for one query
"""
