# 🏗️ pricecart/infrastructure/__init__.py
"""🏗️ Інфраструктурний шар: сховища кошиків та клієнт каталогу."""
