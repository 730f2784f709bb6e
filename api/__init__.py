"""
API 層

只負責 HTTP 轉換，業務邏輯全部交給 core
"""
