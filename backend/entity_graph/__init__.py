"""
Entity Graph -- 实体行为状态图

从实体定义的组件组与事件推导可达行为配置（状态）及事件触发的转移。
"""
