"""
服务层模块
上传前校验、URL解析、存储后端与批量上传
"""
