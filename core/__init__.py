"""
核心業務邏輯層

這個 package 包含所有大廳的核心邏輯，包括：
- Registry：代碼 -> Lobby 的對照表
- Manager：管理 Lobby 的生命週期（建立、加入、離開、開始）
- Reaper：定期回收過期大廳
- Locks：並發控制工具
"""
