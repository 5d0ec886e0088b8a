"""RBAC 控制台权限与导航引擎。"""
