"""
Upload-Util
按配置选择存储后端（本地 / 阿里云OSS / 腾讯云COS / 华为云OBS / AWS S3 / MinIO）的统一文件上传工具
"""
__version__ = "1.0.0"
