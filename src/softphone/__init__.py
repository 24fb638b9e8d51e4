"""
softphone — Сервис провижининга softphone-тенантов в Ringotel.

Синхронизирует организации, подключения (branches), пользователей и
SMS-транки Ringotel с доменами и extensions локальной FusionPBX.
"""

__version__ = "1.0.0"
