"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換：
- NamingService：大廳代碼、玩家 ID 與名稱生成邏輯
"""
