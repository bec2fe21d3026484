# 🧰 pricecart/shared/__init__.py
