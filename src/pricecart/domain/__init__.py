# 🧠 pricecart/domain/__init__.py
"""🧠 Доменний шар: гроші, умови, правила, кошик і злиття."""
