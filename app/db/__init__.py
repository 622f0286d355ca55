"""Accès au store Supabase"""
from .supabase_client import SupabaseClient, check_store, get_supabase_client, get_supabase

__all__ = ["SupabaseClient", "check_store", "get_supabase_client", "get_supabase"]
